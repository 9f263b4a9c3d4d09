"""Collect answers from the rendered form for snapshots and submissions."""

from __future__ import annotations

import random
import string
import time
from datetime import datetime
from typing import Callable

from constants.keys import ElementNames
from models.records import AnswerValue, PersistedSnapshot, SubmissionDocument, utc_timestamp
from wizard.dom import InputElement, InputType, RenderedForm
from wizard.registry import QuestionTitleIndex

_SESSION_ALPHABET = string.digits + string.ascii_lowercase
_SESSION_SUFFIX_LENGTH = 9


def _is_question_id(value: str | None) -> bool:
    return bool(value) and value.startswith(ElementNames.PREFIX)


def generate_session_id(*, now_ms: int | None = None, rng: random.Random | None = None) -> str:
    """Return ``study_<epoch-ms>_<9 base36 chars>``.

    Uniqueness is best effort; collisions are tolerated.
    """

    millis = int(time.time() * 1000) if now_ms is None else now_ms
    chooser = rng or random
    suffix = "".join(chooser.choice(_SESSION_ALPHABET) for _ in range(_SESSION_SUFFIX_LENGTH))
    return f"study_{millis}_{suffix}"


def collect_snapshot_responses(form: RenderedForm) -> dict[str, AnswerValue]:
    """Return the resume payload: raw element keys mapped to widget values."""

    responses: dict[str, AnswerValue] = {}
    for element in form.iter_inputs(InputType.TEXT):
        if _is_question_id(element.element_id) and element.value:
            responses[element.element_id] = element.value
    for element in form.iter_inputs(InputType.CHECKBOX):
        if _is_question_id(element.element_id):
            responses[element.element_id] = element.checked
    for element in form.iter_inputs(InputType.RADIO):
        if not element.checked or not _is_question_id(element.name):
            continue
        responses[element.name] = element.value
        companion = element.companion
        if companion is not None and companion.value:
            responses[f"{element.name}{ElementNames.OTHER_SNAPSHOT_SUFFIX}"] = companion.value
    return responses


def build_snapshot(form: RenderedForm, current_page: int, *, when: datetime | None = None) -> PersistedSnapshot:
    return PersistedSnapshot(
        current_page=current_page,
        responses=collect_snapshot_responses(form),
        timestamp=utc_timestamp(when),
    )


def _record_radio(
    responses: dict[str, AnswerValue], element: InputElement, titles: QuestionTitleIndex
) -> None:
    key = titles.export_key(element.name or "")
    if element.value != ElementNames.OTHER_VALUE:
        responses[key] = element.value
        return
    free_text = element.companion.value if element.companion is not None else ""
    responses[key] = free_text or ElementNames.OTHER_VALUE
    responses[f"{key}{ElementNames.OTHER_EXPORT_SUFFIX}"] = free_text


def collect_submission_responses(form: RenderedForm, titles: QuestionTitleIndex) -> dict[str, AnswerValue]:
    """Return the export payload keyed by ``<id>_<title>`` across every page."""

    responses: dict[str, AnswerValue] = {}
    for element in form.iter_inputs(InputType.TEXT):
        if _is_question_id(element.element_id):
            responses[titles.export_key(element.element_id)] = element.value
    for element in form.iter_inputs(InputType.CHECKBOX):
        if _is_question_id(element.element_id):
            responses[titles.export_key(element.element_id)] = element.checked
    for element in form.iter_inputs(InputType.RADIO):
        if element.checked and _is_question_id(element.name):
            _record_radio(responses, element, titles)
    return responses


def build_submission(
    form: RenderedForm,
    titles: QuestionTitleIndex,
    *,
    session_id_factory: Callable[[], str] = generate_session_id,
    when: datetime | None = None,
) -> SubmissionDocument:
    return SubmissionDocument(
        submission_time=utc_timestamp(when),
        session_id=session_id_factory(),
        responses=collect_submission_responses(form, titles),
    )


__all__ = [
    "build_snapshot",
    "build_submission",
    "collect_snapshot_responses",
    "collect_submission_responses",
    "generate_session_id",
]
