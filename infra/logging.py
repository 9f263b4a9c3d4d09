"""Structured logging utilities for the study wizard."""

from __future__ import annotations

import json
import logging
import tempfile
import time
from pathlib import Path
from typing import Any, Dict

LOGGER = logging.getLogger("study_wizard")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_debug_payloads = False


def configure_logging(level: str | int = "INFO", *, debug: bool = False) -> None:
    """Install a basic stream handler once and set the root level.

    ``debug`` turns on the payload dumps of :func:`log_event`.
    """

    global _debug_payloads
    _debug_payloads = debug

    if isinstance(level, str):
        resolved = getattr(logging, level.strip().upper(), logging.INFO)
    else:
        resolved = level
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=_LOG_FORMAT)
    root.setLevel(resolved)


def log_event(
    event: str,
    level: str = "info",
    *,
    session_id: str | None = None,
    page: int | None = None,
    detail: str | None = None,
    payload: Dict[str, Any] | None = None,
) -> str:
    """Emit a structured log line and optionally dump payload to a temp file.

    Args:
        event: Short lifecycle event name (``"save"``, ``"submit"``, ...).
        level: Logging level name (e.g., ``"info"``).
        session_id: Optional submission session identifier.
        page: Current wizard page when the event fired.
        detail: Free-form detail string.
        payload: Optional payload to dump for debugging when the
            payload dumps were enabled through :func:`configure_logging`.

    Returns:
        Path to the dumped payload file if written, else an empty string.
    """

    record = {
        "event": event,
        "level": level.lower(),
        "session_id": session_id,
        "page": page,
        "detail": detail,
    }
    safe_record = {k: v for k, v in record.items() if v is not None}
    LOGGER.log(getattr(logging, level.upper(), logging.INFO), json.dumps(safe_record))

    if payload and _debug_payloads:
        path = Path(tempfile.gettempdir()) / f"study_wizard_{event}_{int(time.time())}.json"
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2))
        return str(path)
    return ""
