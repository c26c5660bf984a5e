import json
from pathlib import Path

import pytest

from spendwise.alerts.state import (
    STATE_NAMESPACE,
    AlertState,
    InMemoryAlertStateStore,
    JsonFileAlertStateStore,
)


@pytest.fixture
def json_store(tmp_path: Path) -> JsonFileAlertStateStore:
    return JsonFileAlertStateStore(data_path=str(tmp_path / "alert_state.json"))


def test_mark_and_query() -> None:
    state = AlertState()
    state.mark("2026-01", "food", 90)
    state.mark("2026-01", "food", 80)

    assert state.alerted("2026-01", "food") == {80, 90}
    assert state.has_alerted("2026-01", "food", 80)
    assert not state.has_alerted("2026-02", "food", 80)
    assert state.to_raw() == {"2026-01": {"food": [80, 90]}}


def test_alerted_returns_a_copy() -> None:
    state = AlertState()
    state.mark("2026-01", "food", 80)
    state.alerted("2026-01", "food").add(100)
    assert state.alerted("2026-01", "food") == {80}


def test_prune_drops_older_periods() -> None:
    state = AlertState()
    for key in ("2025-11", "2025-12", "2026-01"):
        state.mark(key, "food", 80)

    dropped = state.prune("2025-12")

    assert dropped == ["2025-11"]
    assert sorted(state.periods) == ["2025-12", "2026-01"]


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "garbage",
        [80, 90],
        {"not-a-month": {"food": [80]}},
        {"2026-01": "food"},
        {"2026-01": {"food": "80"}},
    ],
)
def test_malformed_state_reads_as_empty(raw: object) -> None:
    assert AlertState.from_raw(raw).to_raw() == {}


def test_from_raw_keeps_valid_entries() -> None:
    raw = {
        "2026-01": {"food": [80, "90", True, 100], "bad": None},
        "oops": [],
    }
    assert AlertState.from_raw(raw).to_raw() == {"2026-01": {"food": [80, 100]}}


def test_in_memory_store_copies_documents() -> None:
    store = InMemoryAlertStateStore()
    assert store.read_all() is None

    document = {"2026-01": {"food": [80]}}
    store.write_all(document)
    document["2026-01"]["food"].append(90)

    assert store.read_all() == {"2026-01": {"food": [80]}}
    assert store.writes == 1


def test_json_store_round_trip(json_store: JsonFileAlertStateStore) -> None:
    assert json_store.read_all() is None

    json_store.write_all({"2026-01": {"food": [80, 90]}})

    # A fresh instance reads what the first one wrote
    reloaded = JsonFileAlertStateStore(data_path=json_store.data_path)
    assert reloaded.read_all() == {"2026-01": {"food": [80, 90]}}

    with open(json_store.data_path, encoding="utf-8") as f:
        assert STATE_NAMESPACE in json.load(f)


def test_json_store_corrupt_file(json_store: JsonFileAlertStateStore) -> None:
    Path(json_store.data_path).write_text("{not json", encoding="utf-8")
    assert json_store.read_all() is None


def test_json_store_unexpected_document(json_store: JsonFileAlertStateStore) -> None:
    Path(json_store.data_path).write_text("[1, 2, 3]", encoding="utf-8")
    assert json_store.read_all() is None


def test_json_store_leaves_no_temp_files(json_store: JsonFileAlertStateStore, tmp_path: Path) -> None:
    json_store.write_all({})
    json_store.write_all({"2026-01": {"food": [100]}})
    assert [p.name for p in tmp_path.iterdir()] == ["alert_state.json"]
