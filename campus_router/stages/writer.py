from __future__ import annotations

from typing import Any, Sequence

from campus_router.config import StatusConfig
from campus_router.storage.base import TabularStore
from campus_router.utils import get_logger

logger = get_logger(__name__)


def append_rows(store: TabularStore, name: str, rows: Sequence[Sequence[Any]]) -> int:
    """Append ``rows`` below the last occupied row of ``name`` in one write.

    Returns the number of rows written; nothing happens for an empty batch
    or a missing sheet.
    """
    if not rows or not store.exists(name):
        return 0
    start = store.last_row(name) + 1
    store.write_rows(name, start, [list(r) for r in rows])
    logger.info("writer.append: sheet=%s start=%d rows=%d", name, start, len(rows))
    return len(rows)


def attach_status(store: TabularStore, name: str, row: int, status: StatusConfig) -> None:
    store.set_constrained_enum(
        name,
        row,
        status.column_index,
        status.values,
        reject_invalid=status.reject_invalid,
        allow_blank=status.allow_blank,
    )
