from __future__ import annotations

from typing import Any, Optional, Sequence

from campus_router.registry import CampusRegistry, Category, default_registry


def resolve_column(headers: Sequence[Any], label: str, fallback: int) -> int:
    """Index of ``label`` in the header row, or ``fallback`` when absent."""
    try:
        return list(headers).index(label)
    except ValueError:
        return fallback


def campus_of(record: Sequence[Any], campus_idx: int) -> Any:
    if 0 <= campus_idx < len(record):
        return record[campus_idx]
    return None


def route(
    record: Sequence[Any],
    campus_idx: int,
    registry: Optional[CampusRegistry] = None,
) -> Category:
    reg = registry or default_registry()
    return reg.classify(campus_of(record, campus_idx))
