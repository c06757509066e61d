import datetime as dt
import logging

from campus_router.config import RouterConfig
from campus_router.orchestrator import RunStatus, dispatch, handle_submission, replay_all
from campus_router.storage.memory import InMemoryWorkbook

HEADER = ["Timestamp", "Email", "Campus", "Teacher", "Student"]
SRC = "Form Responses 1"


def _ts(minute):
    return dt.datetime(2024, 9, 3, 8, minute, 0)


def _workbook(rows, header=HEADER, extra=None):
    sheets = {
        SRC: [header] + rows,
        "ES": [header],
        "MS": [header],
        "HS": [header],
    }
    sheets.update(extra or {})
    return InMemoryWorkbook(sheets)


def test_end_to_end_scenario():
    rows = [
        [_ts(1), "x", "Allen", "T", "S"],
        [_ts(2), "x", "Bernal", "T", "S"],
        [_ts(3), "x", "Mars", "T", "S"],
    ]
    store = _workbook(rows)
    result = replay_all(store, RouterConfig())

    assert result.status is RunStatus.OK
    assert result.processed == 3
    assert result.unrouted == 1
    assert store.sheets["ES"][1:] == [rows[0]]
    assert store.sheets["MS"][1:] == [rows[1]]
    assert store.sheets["HS"][1:] == []
    annotated = sorted(r for (sheet, r, col) in store.validations if sheet == SRC and col == 10)
    assert annotated == [2, 3, 4]


def test_replay_is_idempotent():
    rows = [
        [_ts(1), "x", "Allen", "T", "S"],
        [_ts(2), "x", "Brandeis", "T", "S"],
    ]
    store = _workbook(rows)
    cfg = RouterConfig()
    first = replay_all(store, cfg)
    counts = {n: len(store.sheets[n]) for n in ("ES", "MS", "HS")}
    calls = len(store.write_calls)
    validations = dict(store.validations)

    second = replay_all(store, cfg)
    assert first.processed == 2
    assert second.processed == 0
    assert second.duplicates == 2
    assert {n: len(store.sheets[n]) for n in ("ES", "MS", "HS")} == counts
    assert len(store.write_calls) == calls
    assert store.validations == validations


def test_unrouted_rows_are_processed_again_on_replay():
    # unmatched rows never reach a destination, so their timestamps stay unseen
    store = _workbook([[_ts(1), "x", "Mars", "T", "S"]])
    cfg = RouterConfig()
    assert replay_all(store, cfg).processed == 1
    assert replay_all(store, cfg).processed == 1


def test_order_preserved_per_destination():
    rows = [
        [_ts(1), "x", "Allen", "a", "1"],
        [_ts(2), "x", "Bernal", "b", "2"],
        [_ts(3), "x", "Aue", "c", "3"],
        [_ts(4), "x", "Clark", "d", "4"],
        [_ts(5), "x", "Beard", "e", "5"],
        [_ts(6), "x", "Northside Alternative MS", "f", "6"],
    ]
    store = _workbook(rows)
    replay_all(store, RouterConfig())
    assert store.sheets["ES"][1:] == [rows[0], rows[2], rows[4]]
    assert store.sheets["MS"][1:] == [rows[1], rows[5]]
    assert store.sheets["HS"][1:] == [rows[3]]


def test_campus_fallback_index_when_header_missing():
    header = ["Timestamp", "Email", "School", "Teacher", "Student"]
    rows = [
        [_ts(1), "Bernal", "Allen", "T", "S"],
        [_ts(2), "Allen", "Clark", "T", "S"],
    ]
    store = _workbook(rows, header=header)
    replay_all(store, RouterConfig())
    assert store.sheets["ES"][1:] == [rows[0]]
    assert store.sheets["HS"][1:] == [rows[1]]
    assert store.sheets["MS"][1:] == []


def test_timestamp_header_lookup_and_fallback():
    header = ["Email", "Campus", "Submitted"]
    rows = [["x", "Allen", "t"]]
    store = InMemoryWorkbook({
        SRC: [header] + rows,
        "ES": [header, ["x", "Allen", "t"]],
        "MS": [header],
        "HS": [header],
    })
    # no Timestamp header: index 0 (Email) is the key, and "x" is already in ES
    result = replay_all(store, RouterConfig())
    assert result.duplicates == 1
    assert result.processed == 0


def test_duplicate_filtering():
    header_ts = _ts(1)
    existing = [header_ts, "x", "Allen", "T", "S"]
    rows = [
        [header_ts, "x", "Allen", "T", "S"],
        [_ts(2), "x", "Allen", "T2", "S2"],
    ]
    store = _workbook(rows, extra={"ES": [HEADER, existing]})
    result = replay_all(store, RouterConfig())
    assert result.duplicates == 1
    assert result.processed == 1
    assert store.sheets["ES"][1:] == [existing, rows[1]]
    assert (SRC, 2, 10) not in store.validations
    assert (SRC, 3, 10) in store.validations


def test_duplicate_matches_text_rendering_of_timestamp():
    existing = ["2024-09-03 08:01:00", "x", "Allen", "T", "S"]
    store = _workbook([[_ts(1), "x", "Allen", "T", "S"]], extra={"ES": [HEADER, existing]})
    assert replay_all(store, RouterConfig()).duplicates == 1


def test_one_write_per_destination():
    rows = [[_ts(i), "x", "Clark", "T", str(i)] for i in range(10)]
    store = _workbook(rows)
    replay_all(store, RouterConfig())
    calls = store.calls_for("HS")
    assert len(calls) == 1
    assert calls[0].rows == rows
    assert store.calls_for("ES") == []
    assert store.calls_for("MS") == []


def test_blank_timestamp_rows_skipped(caplog):
    rows = [[None, "x", "Allen", "T", "S"], ["", "x", "Aue", "T", "S"]]
    store = _workbook(rows)
    with caplog.at_level(logging.WARNING, logger="campus_router.orchestrator"):
        result = replay_all(store, RouterConfig())
    assert "not routed until a timestamp is filled in" in caplog.text
    assert result.skipped_blank == 2
    assert result.processed == 0
    assert store.write_calls == []


def test_replay_stops_on_empty_source():
    store = _workbook([])
    assert replay_all(store, RouterConfig()).status is RunStatus.EMPTY_SOURCE
    store = InMemoryWorkbook({SRC: [], "ES": [], "MS": [], "HS": []})
    assert replay_all(store, RouterConfig()).status is RunStatus.EMPTY_SOURCE


def test_replay_aborts_when_destination_missing():
    store = InMemoryWorkbook({SRC: [HEADER, [_ts(1), "x", "Allen", "T", "S"]], "ES": [HEADER], "MS": [HEADER]})
    result = replay_all(store, RouterConfig())
    assert result.status is RunStatus.MISSING_COLLECTION
    assert result.missing == ["HS"]
    assert store.write_calls == []
    assert store.validations == {}


def test_replay_aborts_when_source_missing():
    store = InMemoryWorkbook({"ES": [HEADER], "MS": [HEADER], "HS": [HEADER]})
    result = replay_all(store, RouterConfig())
    assert result.status is RunStatus.MISSING_COLLECTION
    assert result.missing == [SRC]


def test_single_record_routes_and_annotates():
    record = [_ts(1), "x", "Bernal", "T", "S"]
    store = _workbook([record])
    result = handle_submission(store, RouterConfig(), record)
    assert result.mode == "single"
    assert result.routed == {"MS": 1}
    assert store.sheets["MS"][1:] == [record]
    assert store.calls_for("MS")[0].rows == [record]
    assert (SRC, 2, 10) in store.validations


def test_single_record_unmatched_still_annotated():
    record = [_ts(1), "x", "Mars", "T", "S"]
    store = _workbook([[_ts(0), "x", "Allen", "T", "S"], record])
    result = handle_submission(store, RouterConfig(), record)
    assert result.unrouted == 1
    assert store.write_calls == []
    assert list(store.validations) == [(SRC, 3, 10)]


def test_single_record_does_not_rescan_history():
    old = [_ts(0), "x", "Allen", "T", "S"]
    record = [_ts(1), "x", "Aue", "T", "S"]
    store = _workbook([old, record])
    handle_submission(store, RouterConfig(), record)
    assert store.sheets["ES"][1:] == [record]


def test_single_record_uses_campus_header_position():
    header = ["Timestamp", "Email", "Name", "Campus"]
    # index 2 holds an elementary name, the Campus column a high school
    record = [_ts(1), "x", "Allen", "Clark"]
    store = _workbook([record], header=header)
    result = handle_submission(store, RouterConfig(), record)
    assert result.routed == {"HS": 1}
    assert store.sheets["HS"][1:] == [record]
    assert store.sheets["ES"][1:] == []


def test_single_record_campus_fallback_without_header():
    header = ["Timestamp", "Email", "School", "Campus Name"]
    record = [_ts(1), "x", "Bernal", "Allen"]
    store = _workbook([record], header=header)
    result = handle_submission(store, RouterConfig(), record)
    assert result.routed == {"MS": 1}
    assert store.sheets["MS"][1:] == [record]
    assert store.sheets["ES"][1:] == []


def test_single_record_missing_destination_is_silent():
    record = [_ts(1), "x", "Allen", "T", "S"]
    store = InMemoryWorkbook({SRC: [HEADER, record], "ES": [HEADER]})
    result = handle_submission(store, RouterConfig(), record)
    assert result.status is RunStatus.MISSING_COLLECTION
    assert set(result.missing) == {"MS", "HS"}
    assert store.validations == {}


def test_malformed_record_falls_back_to_replay():
    rows = [[_ts(1), "x", "Allen", "T", "S"]]
    for record in (None, [], ()):
        store = _workbook(rows)
        result = handle_submission(store, RouterConfig(), record)
        assert result.mode == "replay"
        assert store.sheets["ES"][1:] == rows


def test_dispatch_selects_mode():
    rows = [[_ts(1), "x", "Allen", "T", "S"]]
    assert dispatch(_workbook(rows), RouterConfig()).mode == "replay"
    assert dispatch(_workbook(rows), RouterConfig(), rows[0]).mode == "single"


def test_special_sheet_variant():
    cfg = RouterConfig(special_sheet="SpSch")
    rows = [
        [_ts(1), "x", "Reddix Center", "T", "S"],
        [_ts(2), "x", "Northside Alternative MS", "T", "S"],
        [_ts(3), "x", "Allen", "T", "S"],
    ]
    store = _workbook(rows, extra={"SpSch": [HEADER]})
    result = replay_all(store, cfg)
    assert result.routed == {"ES": 1, "MS": 0, "HS": 0, "SpSch": 2}
    assert store.sheets["SpSch"][1:] == rows[:2]

    # second run also sees timestamps already in the special sheet
    assert replay_all(store, cfg).processed == 0

    store = _workbook(rows)
    assert replay_all(store, cfg).missing == ["SpSch"]
