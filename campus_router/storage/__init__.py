"""Tabular storage collaborators: the sheet interface and its backends."""

from campus_router.storage.base import TabularStore
from campus_router.storage.memory import InMemoryWorkbook
from campus_router.storage.xlsx import XlsxWorkbookStore

__all__ = ["TabularStore", "InMemoryWorkbook", "XlsxWorkbookStore"]
