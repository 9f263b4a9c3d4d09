"""Persisted record and export payload models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

AnswerValue = Union[StrictBool, StrictStr]


def utc_timestamp(moment: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and ``Z`` suffix."""

    value = moment or datetime.now(timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _RecordModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class PersistedSnapshot(_RecordModel):
    """In-progress state stored under ``study_progress``."""

    current_page: Optional[int] = Field(default=None, alias="currentPage")
    responses: Dict[str, AnswerValue]
    timestamp: Optional[str] = None


class CompletionRecord(_RecordModel):
    """Marker stored under ``study_completed`` once a study was submitted."""

    completed: bool = True
    completion_time: str = Field(default_factory=utc_timestamp, alias="completionTime")


class SubmissionDocument(_RecordModel):
    """The exported submission file payload."""

    submission_time: str = Field(default_factory=utc_timestamp, alias="submissionTime")
    session_id: str = Field(alias="sessionId")
    responses: Dict[str, AnswerValue] = Field(default_factory=dict)


__all__ = [
    "AnswerValue",
    "CompletionRecord",
    "PersistedSnapshot",
    "SubmissionDocument",
    "utc_timestamp",
]
