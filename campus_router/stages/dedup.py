from __future__ import annotations

import datetime as dt
from typing import Any, Iterable, Optional, Set

from campus_router.storage.base import TabularStore
from campus_router.utils import get_logger, parse_timestamp

logger = get_logger(__name__)


def timestamp_key(value: Any) -> Optional[str]:
    """Canonical string for a submission timestamp.

    Values that parse as a date/time collapse to ISO form, so a datetime
    cell and its text rendering produce the same key. Anything else falls
    back to its trimmed ``str``. Blank values have no key.
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    parsed = parse_timestamp(value)
    if parsed is not None:
        return parsed.isoformat()
    if isinstance(value, (dt.date, dt.time)):
        return value.isoformat()
    return str(value).strip()


class DedupIndex:
    """Timestamps already present in any destination sheet."""

    def __init__(self, keys: Iterable[str] = ()):
        self._keys: Set[str] = set(keys)

    def __len__(self) -> int:
        return len(self._keys)

    def contains(self, key: Optional[str]) -> bool:
        return key is not None and key in self._keys

    @classmethod
    def build(cls, store: TabularStore, destinations: Iterable[str], timestamp_idx: int) -> "DedupIndex":
        keys: Set[str] = set()
        for name in destinations:
            if store.last_row(name) == 0:
                continue
            for row in store.all_rows(name):
                if timestamp_idx >= len(row):
                    continue
                key = timestamp_key(row[timestamp_idx])
                if key is not None:
                    keys.add(key)
        logger.info("dedup.index: keys=%d", len(keys))
        return cls(keys)
