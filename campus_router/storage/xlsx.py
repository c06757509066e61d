from __future__ import annotations

from pathlib import Path
from typing import Any, Collection, List, Optional, Sequence, Union

from openpyxl import Workbook, load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.datavalidation import DataValidation
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from campus_router.storage.base import Row
from campus_router.utils import get_logger

logger = get_logger(__name__)


class XlsxWorkbookStore:
    """Workbook store backed by an ``.xlsx`` file.

    Changes stay in memory until ``save()``; used as a context manager the
    workbook is saved when the block exits without an exception.
    """

    def __init__(self, path: Union[str, Path], workbook: Workbook = None):
        self.path = Path(path)
        self.workbook = workbook if workbook is not None else load_workbook(self.path)
        self.dirty = False

    @classmethod
    def open(cls, path: Union[str, Path]) -> "XlsxWorkbookStore":
        return cls(path)

    def __enter__(self) -> "XlsxWorkbookStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None and self.dirty:
            self.save()
        self.workbook.close()

    def exists(self, name: str) -> bool:
        return name in self.workbook.sheetnames

    def last_row(self, name: str) -> int:
        ws = self.workbook[name]
        # openpyxl reports max_row == 1 for a blank sheet
        for row_idx in range(ws.max_row, 0, -1):
            if any(cell.value is not None for cell in ws[row_idx]):
                return row_idx
        return 0

    def header_row(self, name: str) -> Row:
        if self.last_row(name) == 0:
            return []
        ws = self.workbook[name]
        return [cell.value for cell in ws[1]]

    def all_rows(self, name: str) -> List[Row]:
        last = self.last_row(name)
        if last == 0:
            return []
        ws = self.workbook[name]
        return [list(r) for r in ws.iter_rows(min_row=1, max_row=last, values_only=True)]

    def write_rows(self, name: str, start_row: int, rows: Sequence[Sequence[Any]]) -> None:
        ws = self.workbook[name]
        for offset, row in enumerate(rows):
            for col_idx, value in enumerate(row, start=1):
                ws.cell(row=start_row + offset, column=col_idx, value=value)
        self.dirty = True
        logger.debug("xlsx.write: sheet=%s start=%d rows=%d", name, start_row, len(rows))

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
        ws = self.workbook[name]
        formula = '"{}"'.format(",".join(allowed_values))
        coord = f"{get_column_letter(column_index + 1)}{row}"
        dv = self._find_list_validation(ws, formula, reject_invalid=reject_invalid, allow_blank=allow_blank)
        if dv is None:
            dv = DataValidation(
                type="list",
                formula1=formula,
                allow_blank=allow_blank,
                showDropDown=False,
                showErrorMessage=reject_invalid,
                errorStyle="stop" if reject_invalid else "information",
            )
            ws.add_data_validation(dv)
        elif coord in dv.sqref:
            return
        dv.add(coord)
        self.dirty = True

    @staticmethod
    def _find_list_validation(ws, formula: str, *, reject_invalid: bool, allow_blank: bool) -> Optional[DataValidation]:
        # rules saved by earlier runs are reloaded with the sheet
        for dv in ws.data_validations.dataValidation:
            if (
                dv.type == "list"
                and dv.formula1 == formula
                and bool(dv.allow_blank) == allow_blank
                and bool(dv.showErrorMessage) == reject_invalid
            ):
                return dv
        return None

    @retry(stop=stop_after_attempt(5), wait=wait_exponential(multiplier=1, min=1, max=10),
           retry=retry_if_exception_type(PermissionError), reraise=True)
    def save(self) -> None:
        self.workbook.save(self.path)
        self.dirty = False
        logger.info("workbook saved path=%s", self.path)
