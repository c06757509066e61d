"""Routing stages: classification, replay deduplication, batched writes.

Each stage exposes a small function API over plain row lists and the
``TabularStore`` interface.
"""
