import enum
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from campus_router.config import RouterConfig, load_config
from campus_router.registry import Category, CampusRegistry, default_registry
from campus_router.stages.dedup import DedupIndex, timestamp_key
from campus_router.stages.router import campus_of, resolve_column, route
from campus_router.stages.writer import append_rows, attach_status
from campus_router.storage.base import TabularStore
from campus_router.storage.xlsx import XlsxWorkbookStore
from campus_router.utils import get_logger

logger = get_logger(__name__)


class RunStatus(enum.Enum):
    OK = "ok"
    MISSING_COLLECTION = "missing_collection"
    EMPTY_SOURCE = "empty_source"


@dataclass
class RunResult:
    mode: str
    status: RunStatus = RunStatus.OK
    processed: int = 0
    routed: Dict[str, int] = field(default_factory=dict)
    unrouted: int = 0
    duplicates: int = 0
    skipped_blank: int = 0
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "status": self.status.value,
            "processed": self.processed,
            "routed": dict(self.routed),
            "unrouted": self.unrouted,
            "duplicates": self.duplicates,
            "skipped_blank": self.skipped_blank,
            "missing": list(self.missing),
        }


def _registry_for(cfg: RouterConfig) -> CampusRegistry:
    return default_registry(split_special=cfg.split_special)


def _missing_sheets(store: TabularStore, names: Sequence[str]) -> List[str]:
    return [n for n in names if not store.exists(n)]


def is_well_formed(record: Any) -> bool:
    return isinstance(record, (list, tuple)) and len(record) > 0


def handle_submission(store: TabularStore, cfg: RouterConfig, record: Optional[Sequence[Any]]) -> RunResult:
    """Route one freshly submitted form response.

    The record is expected to already sit on the last row of the source
    sheet. Only that row and the header are touched.
    """
    if not is_well_formed(record):
        logger.info("no submitted record found, processing all rows")
        return replay_all(store, cfg)

    result = RunResult(mode="single")
    if not store.exists(cfg.source_sheet):
        logger.warning("abort: source sheet missing sheet=%s", cfg.source_sheet)
        result.status = RunStatus.MISSING_COLLECTION
        result.missing = [cfg.source_sheet]
        return result

    campus_idx = resolve_column(store.header_row(cfg.source_sheet), cfg.campus_column, cfg.campus_fallback_index)

    destinations = cfg.destinations()
    missing = _missing_sheets(store, list(destinations.values()))
    if missing:
        logger.warning("abort: destination sheets missing sheets=%s", missing)
        result.status = RunStatus.MISSING_COLLECTION
        result.missing = missing
        return result

    category = route(record, campus_idx, _registry_for(cfg))

    # every new submission gets a status cell, routed or not
    source_row = store.last_row(cfg.source_sheet)
    if source_row > 1:
        attach_status(store, cfg.source_sheet, source_row, cfg.status)
    result.processed = 1

    if category is Category.UNMATCHED:
        logger.info("unrouted campus=%r", campus_of(record, campus_idx))
        result.unrouted = 1
        return result

    sheet = destinations[category]
    result.routed[sheet] = append_rows(store, sheet, [record])
    logger.info("routed campus=%r -> %s", campus_of(record, campus_idx), sheet)
    return result


def replay_all(store: TabularStore, cfg: RouterConfig) -> RunResult:
    """Re-scan the whole source sheet and route rows not yet in any destination.

    Safe to run repeatedly: a row whose timestamp already appears in a
    destination is skipped without side effects.
    """
    result = RunResult(mode="replay")
    if not store.exists(cfg.source_sheet):
        logger.warning("abort: source sheet missing sheet=%s", cfg.source_sheet)
        result.status = RunStatus.MISSING_COLLECTION
        result.missing = [cfg.source_sheet]
        return result

    data = store.all_rows(cfg.source_sheet)
    if len(data) < 2:
        logger.info("source sheet has no responses sheet=%s", cfg.source_sheet)
        result.status = RunStatus.EMPTY_SOURCE
        return result

    headers = data[0]
    campus_idx = resolve_column(headers, cfg.campus_column, cfg.campus_fallback_index)
    ts_idx = resolve_column(headers, cfg.timestamp_column, cfg.timestamp_fallback_index)

    destinations = cfg.destinations()
    missing = _missing_sheets(store, list(destinations.values()))
    if missing:
        logger.warning("abort: destination sheets missing sheets=%s", missing)
        result.status = RunStatus.MISSING_COLLECTION
        result.missing = missing
        return result

    seen = DedupIndex.build(store, destinations.values(), ts_idx)
    registry = _registry_for(cfg)

    batches: Dict[Category, List[List[Any]]] = {c: [] for c in destinations}
    new_positions: List[int] = []

    for i, row in enumerate(data[1:], start=2):
        key = timestamp_key(row[ts_idx] if ts_idx < len(row) else None)
        if key is None:
            logger.warning("skip row without timestamp row=%d; it is not routed until a timestamp is filled in", i)
            result.skipped_blank += 1
            continue
        if seen.contains(key):
            result.duplicates += 1
            continue

        category = route(row, campus_idx, registry)
        if category is Category.UNMATCHED:
            logger.info("unrouted campus=%r row=%d", campus_of(row, campus_idx), i)
            result.unrouted += 1
        else:
            batches[category].append(row)
        new_positions.append(i)

    for category, sheet in destinations.items():
        result.routed[sheet] = append_rows(store, sheet, batches[category])

    for pos in new_positions:
        attach_status(store, cfg.source_sheet, pos, cfg.status)

    result.processed = len(new_positions)
    logger.info(
        "processed %d new rows (routed=%s unrouted=%d duplicates=%d)",
        result.processed, result.routed, result.unrouted, result.duplicates,
    )
    return result


def dispatch(store: TabularStore, cfg: RouterConfig, record: Optional[Sequence[Any]] = None) -> RunResult:
    """Single-record mode for a well-formed record, replay mode otherwise."""
    if is_well_formed(record):
        return handle_submission(store, cfg, record)
    return replay_all(store, cfg)


def run_once(
    config_path: str,
    *,
    record: Optional[Sequence[Any]] = None,
    workbook: Optional[str] = None,
    submit: bool = False,
) -> RunResult:
    """Load config, open the workbook, route, save.

    With ``submit`` the record is first appended to the source sheet, the
    way the form service delivers a response.
    """
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        cfg = load_config(config_path)
        path = workbook or cfg.workbook
        if not path:
            raise ValueError("workbook path required (config 'workbook' or --workbook)")
        with XlsxWorkbookStore.open(path) as store:
            if submit and is_well_formed(record) and store.exists(cfg.source_sheet):
                append_rows(store, cfg.source_sheet, [record])
            result = dispatch(store, cfg, record)
        logger.info("run result=%s", result.to_dict())
        return result

    except Exception as e:
        logger.error("Run failed: %s", e)
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)
