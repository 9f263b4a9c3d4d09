"""Serialization of completed study submissions."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from models.records import SubmissionDocument

logger = logging.getLogger(__name__)

SUBMISSION_MIME_TYPE = "application/json"


def submission_filename(session_id: str) -> str:
    return f"user_study_{session_id}.json"


def serialize_submission(document: SubmissionDocument) -> bytes:
    """Return the pretty-printed JSON payload offered for download."""

    return json.dumps(document.to_payload(), ensure_ascii=False, indent=2).encode("utf-8")


def write_submission(document: SubmissionDocument, directory: str | Path) -> Path:
    """Write ``document`` into ``directory`` and return the file path."""

    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / submission_filename(document.session_id)
    path.write_bytes(serialize_submission(document))
    logger.info("Submission written to %s", path)
    return path


__all__ = ["SUBMISSION_MIME_TYPE", "serialize_submission", "submission_filename", "write_submission"]
