"""Persistence stores, durable records and autosave scheduling."""

from .autosave import AutosaveScheduler
from .records import clear_all, clear_snapshot, is_completed, mark_completed, read_snapshot, save_snapshot
from .store import JsonFileStore, MemoryStore, PersistenceStore, SessionStateStore, create_store

__all__ = [
    "AutosaveScheduler",
    "JsonFileStore",
    "MemoryStore",
    "PersistenceStore",
    "SessionStateStore",
    "clear_all",
    "clear_snapshot",
    "create_store",
    "is_completed",
    "mark_completed",
    "read_snapshot",
    "save_snapshot",
]
