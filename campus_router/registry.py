from __future__ import annotations

import enum
from functools import lru_cache
from typing import Any, FrozenSet, Iterable

from campus_router.campuses import (
    ELEMENTARY_CAMPUSES,
    HIGH_CAMPUSES,
    MIDDLE_CAMPUSES,
    MIDDLE_SPECIAL_SCHOOLS,
    SPECIAL_SCHOOLS,
)


class Category(enum.Enum):
    ELEMENTARY = "elementary"
    MIDDLE = "middle"
    HIGH = "high"
    SPECIAL = "special"
    UNMATCHED = "unmatched"


class CampusRegistry:
    """Set-based campus classifier.

    Special schools are exceptions to their own names: the ones listed in
    ``middle_special`` resolve to MIDDLE, every other special school
    resolves to HIGH. With ``split_special`` all special schools resolve to
    SPECIAL instead.

    Lookup order is elementary, special (when split), middle, high; the
    first set containing the name wins.
    """

    def __init__(
        self,
        elementary: Iterable[str],
        middle: Iterable[str],
        high: Iterable[str],
        special: Iterable[str] = (),
        middle_special: Iterable[str] = (),
        *,
        split_special: bool = False,
    ):
        self.split_special = split_special
        self._elementary = frozenset(elementary)
        self._middle = frozenset(middle)
        self._special = frozenset(special)
        self._middle_special = frozenset(middle_special) & self._special
        high_special = self._special - self._middle_special
        self._high = frozenset(high) | high_special

    def classify(self, name: Any) -> Category:
        if not isinstance(name, str):
            return Category.UNMATCHED
        if name in self._elementary:
            return Category.ELEMENTARY
        if self.split_special and name in self._special:
            return Category.SPECIAL
        if name in self._middle or name in self._middle_special:
            return Category.MIDDLE
        if name in self._high:
            return Category.HIGH
        return Category.UNMATCHED

    def names(self, category: Category) -> FrozenSet[str]:
        if category is Category.ELEMENTARY:
            return self._elementary
        if category is Category.SPECIAL:
            return self._special if self.split_special else frozenset()
        if self.split_special:
            # special schools are routed on their own
            if category is Category.MIDDLE:
                return self._middle
            if category is Category.HIGH:
                return self._high - self._special
        if category is Category.MIDDLE:
            return self._middle | self._middle_special
        if category is Category.HIGH:
            return self._high
        return frozenset()


@lru_cache(maxsize=None)
def default_registry(split_special: bool = False) -> CampusRegistry:
    return CampusRegistry(
        ELEMENTARY_CAMPUSES,
        MIDDLE_CAMPUSES,
        HIGH_CAMPUSES,
        SPECIAL_SCHOOLS,
        MIDDLE_SPECIAL_SCHOOLS,
        split_special=split_special,
    )


def classify(name: Any) -> Category:
    return default_registry().classify(name)
