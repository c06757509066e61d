from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import yaml

from campus_router.registry import Category
from campus_router.utils import validate_config

SOURCE_SHEET = "Form Responses 1"
CAMPUS_COLUMN = "Campus"
CAMPUS_FALLBACK_INDEX = 2
TIMESTAMP_COLUMN = "Timestamp"
TIMESTAMP_FALLBACK_INDEX = 0
STATUS_COLUMN_INDEX = 10
STATUS_VALUES = ("Approved", "Denied", "Processed")


@dataclass(frozen=True)
class StatusConfig:
    column_index: int = STATUS_COLUMN_INDEX
    values: Tuple[str, ...] = STATUS_VALUES
    reject_invalid: bool = True
    allow_blank: bool = True


@dataclass(frozen=True)
class RouterConfig:
    """Resolved runtime settings; every field defaults to the stock workbook layout."""

    workbook: Optional[str] = None
    source_sheet: str = SOURCE_SHEET
    campus_column: str = CAMPUS_COLUMN
    campus_fallback_index: int = CAMPUS_FALLBACK_INDEX
    timestamp_column: str = TIMESTAMP_COLUMN
    timestamp_fallback_index: int = TIMESTAMP_FALLBACK_INDEX
    elementary_sheet: str = "ES"
    middle_sheet: str = "MS"
    high_sheet: str = "HS"
    special_sheet: Optional[str] = None
    status: StatusConfig = field(default_factory=StatusConfig)

    @property
    def split_special(self) -> bool:
        return self.special_sheet is not None

    def destinations(self) -> Dict[Category, str]:
        """Destination sheet per category, in write order."""
        out = {
            Category.ELEMENTARY: self.elementary_sheet,
            Category.MIDDLE: self.middle_sheet,
            Category.HIGH: self.high_sheet,
        }
        if self.special_sheet is not None:
            out[Category.SPECIAL] = self.special_sheet
        return out

    @classmethod
    def from_dict(cls, cfg: Optional[Dict[str, Any]]) -> "RouterConfig":
        cfg = cfg or {}
        validate_config(cfg)
        src = cfg.get("source") or {}
        dst = cfg.get("destinations") or {}
        st = cfg.get("status") or {}
        status = StatusConfig(
            column_index=int(st.get("column_index", STATUS_COLUMN_INDEX)),
            values=tuple(st.get("values", STATUS_VALUES)),
            reject_invalid=bool(st.get("reject_invalid", True)),
            allow_blank=bool(st.get("allow_blank", True)),
        )
        return cls(
            workbook=cfg.get("workbook"),
            source_sheet=src.get("sheet", SOURCE_SHEET),
            campus_column=src.get("campus_column", CAMPUS_COLUMN),
            campus_fallback_index=int(src.get("campus_fallback_index", CAMPUS_FALLBACK_INDEX)),
            timestamp_column=src.get("timestamp_column", TIMESTAMP_COLUMN),
            timestamp_fallback_index=int(src.get("timestamp_fallback_index", TIMESTAMP_FALLBACK_INDEX)),
            elementary_sheet=dst.get("elementary", "ES"),
            middle_sheet=dst.get("middle", "MS"),
            high_sheet=dst.get("high", "HS"),
            special_sheet=dst.get("special"),
            status=status,
        )


def load_config(path: str) -> RouterConfig:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    return RouterConfig.from_dict(cfg)
