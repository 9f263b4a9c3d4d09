"""Key-value persistence stores backing the wizard's durable records.

The stores mirror the browser ``localStorage`` contract: string keys map to
string values, reads of unknown keys return ``None`` and writes overwrite.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Iterator, MutableMapping, Protocol, runtime_checkable

from config import StoreBackend, StudySettings, get_settings

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class PersistenceStore(Protocol):
    """Minimal string key-value store interface."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


def _check_key(key: str) -> str:
    if not isinstance(key, str) or not _KEY_PATTERN.match(key):
        raise ValueError(f"Invalid store key: {key!r}")
    return key


class MemoryStore:
    """Process-local store, used by tests and the ``memory`` backend."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(_check_key(key))

    def set_item(self, key: str, value: str) -> None:
        self._data[_check_key(key)] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(_check_key(key), None)

    def keys(self) -> Iterator[str]:
        return iter(tuple(self._data))

    def __contains__(self, key: object) -> bool:
        return key in self._data


class SessionStateStore:
    """Store scoped to a Streamlit browser session.

    Values live in ``st.session_state`` (or any mutable mapping passed in)
    under a namespaced key so they survive reruns but not a new session.
    """

    def __init__(self, session_state: MutableMapping[str, object] | None = None, *, prefix: str = "store:") -> None:
        if session_state is None:
            import streamlit as st

            session_state = st.session_state
        self._session_state = session_state
        self._prefix = prefix

    def _namespaced(self, key: str) -> str:
        return f"{self._prefix}{_check_key(key)}"

    def get_item(self, key: str) -> str | None:
        value = self._session_state.get(self._namespaced(key))
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        self._session_state[self._namespaced(key)] = str(value)

    def remove_item(self, key: str) -> None:
        self._session_state.pop(self._namespaced(key), None)


class JsonFileStore:
    """Durable store keeping one ``<key>.json`` file per entry in ``directory``."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{_check_key(key)}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Unable to read store entry %s: %s", path, exc)
            return None

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(str(value))
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


def create_store(settings: StudySettings | None = None) -> PersistenceStore:
    """Instantiate the store backend selected in ``settings``."""

    resolved = settings or get_settings()
    if resolved.store_backend is StoreBackend.MEMORY:
        return MemoryStore()
    if resolved.store_backend is StoreBackend.SESSION:
        return SessionStateStore()
    return JsonFileStore(resolved.store_dir)


__all__ = ["JsonFileStore", "MemoryStore", "PersistenceStore", "SessionStateStore", "create_store"]
