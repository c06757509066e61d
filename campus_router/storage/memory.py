from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Collection, Dict, List, Optional, Sequence, Tuple

from campus_router.storage.base import Row


@dataclass(frozen=True)
class EnumRule:
    allowed_values: Tuple[str, ...]
    reject_invalid: bool
    allow_blank: bool


@dataclass
class WriteCall:
    sheet: str
    start_row: int
    rows: List[Row]


class InMemoryWorkbook:
    """Dict-backed workbook.

    Keeps a log of every ``write_rows`` call and the status rules attached
    to each cell so callers can inspect what a run touched.
    """

    def __init__(self, sheets: Optional[Dict[str, Sequence[Sequence[Any]]]] = None):
        self.sheets: Dict[str, List[Row]] = {}
        self.write_calls: List[WriteCall] = []
        self.validations: Dict[Tuple[str, int, int], EnumRule] = {}
        for name, rows in (sheets or {}).items():
            self.add_sheet(name, rows)

    def add_sheet(self, name: str, rows: Sequence[Sequence[Any]] = ()) -> None:
        self.sheets[name] = [list(r) for r in rows]

    def exists(self, name: str) -> bool:
        return name in self.sheets

    def header_row(self, name: str) -> Row:
        rows = self.sheets.get(name) or []
        return list(rows[0]) if rows else []

    def all_rows(self, name: str) -> List[Row]:
        return [list(r) for r in self.sheets.get(name, [])]

    def last_row(self, name: str) -> int:
        return len(self.sheets.get(name, []))

    def write_rows(self, name: str, start_row: int, rows: Sequence[Sequence[Any]]) -> None:
        sheet = self.sheets[name]
        block = [list(r) for r in rows]
        while len(sheet) < start_row - 1:
            sheet.append([])
        for offset, row in enumerate(block):
            pos = start_row - 1 + offset
            if pos < len(sheet):
                sheet[pos] = row
            else:
                sheet.append(row)
        self.write_calls.append(WriteCall(sheet=name, start_row=start_row, rows=block))

    def set_constrained_enum(
        self,
        name: str,
        row: int,
        column_index: int,
        allowed_values: Collection[str],
        *,
        reject_invalid: bool,
        allow_blank: bool,
    ) -> None:
        if name not in self.sheets:
            raise KeyError(name)
        self.validations[(name, row, column_index)] = EnumRule(
            allowed_values=tuple(allowed_values),
            reject_invalid=reject_invalid,
            allow_blank=allow_blank,
        )

    def calls_for(self, name: str) -> List[WriteCall]:
        return [c for c in self.write_calls if c.sheet == name]
