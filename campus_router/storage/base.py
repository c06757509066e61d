"""Contract for the spreadsheet the router reads from and writes to.

Row positions are 1-based with the header on row 1. Column indices are
0-based, matching positions inside a row list.
"""

from __future__ import annotations

from typing import Any, Collection, List, Protocol, Sequence, runtime_checkable

Row = List[Any]


@runtime_checkable
class TabularStore(Protocol):
    def exists(self, name: str) -> bool: ...

    def header_row(self, name: str) -> Row: ...

    def all_rows(self, name: str) -> List[Row]:
        """Every occupied row, header included."""
        ...

    def last_row(self, name: str) -> int:
        """Position of the last occupied row, 0 for an empty sheet."""
        ...

    def write_rows(self, name: str, start_row: int, rows: Sequence[Sequence[Any]]) -> None: ...

    def set_constrained_enum(
        self,
        name: str,
        row: int,
        column_index: int,
        allowed_values: Collection[str],
        *,
        reject_invalid: bool,
        allow_blank: bool,
    ) -> None: ...
