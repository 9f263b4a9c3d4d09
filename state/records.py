"""Typed access to the snapshot and completion records in a persistence store."""

from __future__ import annotations

import json
import logging
from datetime import datetime

from pydantic import ValidationError

from constants.keys import StorageKeys
from core.errors import SnapshotError
from models.records import CompletionRecord, PersistedSnapshot, utc_timestamp
from state.store import PersistenceStore

logger = logging.getLogger(__name__)


def save_snapshot(store: PersistenceStore, snapshot: PersistedSnapshot) -> None:
    """Overwrite the in-progress snapshot."""

    store.set_item(StorageKeys.PROGRESS, json.dumps(snapshot.to_payload(), ensure_ascii=False))


def read_snapshot(store: PersistenceStore) -> PersistedSnapshot | None:
    """Return the stored snapshot or ``None`` when there is none.

    Raises:
        SnapshotError: If the stored entry is not a valid snapshot.
    """

    raw = store.get_item(StorageKeys.PROGRESS)
    if not raw:
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc
    try:
        return PersistedSnapshot.model_validate(payload)
    except ValidationError as exc:
        raise SnapshotError(f"Snapshot has an unexpected shape: {exc}") from exc


def clear_snapshot(store: PersistenceStore) -> None:
    store.remove_item(StorageKeys.PROGRESS)


def mark_completed(store: PersistenceStore, *, when: datetime | None = None) -> CompletionRecord:
    """Write the completion record and return it."""

    record = CompletionRecord(completed=True, completion_time=utc_timestamp(when))
    store.set_item(StorageKeys.COMPLETED, json.dumps(record.to_payload()))
    return record


def is_completed(store: PersistenceStore) -> bool:
    """Return ``True`` only for a parseable record with ``completed: true``."""

    raw = store.get_item(StorageKeys.COMPLETED)
    if not raw:
        return False
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Ignoring unreadable completion record")
        return False
    return isinstance(payload, dict) and payload.get("completed") is True


def clear_all(store: PersistenceStore) -> None:
    """Remove both the snapshot and the completion record."""

    store.remove_item(StorageKeys.PROGRESS)
    store.remove_item(StorageKeys.COMPLETED)


__all__ = [
    "clear_all",
    "clear_snapshot",
    "is_completed",
    "mark_completed",
    "read_snapshot",
    "save_snapshot",
]
