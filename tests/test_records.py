import json
from datetime import datetime, timezone

import pytest

from constants.keys import StorageKeys
from core.errors import SnapshotError
from models.records import PersistedSnapshot, utc_timestamp
from state.records import (
    clear_all,
    clear_snapshot,
    is_completed,
    mark_completed,
    read_snapshot,
    save_snapshot,
)
from state.store import MemoryStore


def test_utc_timestamp_uses_millisecond_z_format() -> None:
    moment = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)

    assert utc_timestamp(moment) == "2024-01-02T03:04:05.678Z"


def test_snapshot_round_trip_uses_wire_names() -> None:
    store = MemoryStore()
    snapshot = PersistedSnapshot(
        current_page=3,
        responses={"q_1": True, "q_2": "hi"},
        timestamp="2024-01-02T03:04:05.678Z",
    )

    save_snapshot(store, snapshot)

    raw = json.loads(store.get_item(StorageKeys.PROGRESS) or "")
    assert raw == {
        "currentPage": 3,
        "responses": {"q_1": True, "q_2": "hi"},
        "timestamp": "2024-01-02T03:04:05.678Z",
    }
    assert read_snapshot(store) == snapshot


def test_missing_snapshot_reads_as_none() -> None:
    assert read_snapshot(MemoryStore()) is None


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"currentPage": 2}),
        json.dumps({"currentPage": 2, "responses": {"q_1": 5}}),
        json.dumps(["responses"]),
    ],
)
def test_malformed_snapshot_raises(raw: str) -> None:
    store = MemoryStore({StorageKeys.PROGRESS: raw})

    with pytest.raises(SnapshotError):
        read_snapshot(store)


def test_completion_record() -> None:
    store = MemoryStore()
    assert is_completed(store) is False

    record = mark_completed(store, when=datetime(2024, 5, 6, tzinfo=timezone.utc))

    assert record.completion_time == "2024-05-06T00:00:00.000Z"
    assert json.loads(store.get_item(StorageKeys.COMPLETED) or "") == {
        "completed": True,
        "completionTime": "2024-05-06T00:00:00.000Z",
    }
    assert is_completed(store) is True


@pytest.mark.parametrize("raw", ["garbage", json.dumps({"completed": "yes"}), json.dumps([True])])
def test_unreadable_completion_counts_as_not_completed(raw: str) -> None:
    assert is_completed(MemoryStore({StorageKeys.COMPLETED: raw})) is False


def test_clear_helpers() -> None:
    store = MemoryStore({StorageKeys.PROGRESS: "{}", StorageKeys.COMPLETED: "{}"})

    clear_snapshot(store)
    assert store.get_item(StorageKeys.PROGRESS) is None
    assert store.get_item(StorageKeys.COMPLETED) == "{}"

    store.set_item(StorageKeys.PROGRESS, "{}")
    clear_all(store)
    assert store.get_item(StorageKeys.PROGRESS) is None
    assert store.get_item(StorageKeys.COMPLETED) is None
