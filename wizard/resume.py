"""Restore a saved session when the wizard starts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from constants.keys import ElementNames
from core.errors import SnapshotError
from models.records import AnswerValue, PersistedSnapshot
from state.records import clear_all, clear_snapshot, is_completed, read_snapshot
from state.store import PersistenceStore
from wizard.dom import InputType, RenderedForm
from wizard.navigation import Navigator

logger = logging.getLogger(__name__)

RESTORED_MESSAGE = "Welcome back! Your progress has been restored from {timestamp}."


@dataclass(frozen=True)
class ResumeResult:
    """Outcome of :func:`resume_session`."""

    restored_page: int | None = None
    restored_responses: int = 0
    timestamp: str | None = None
    discarded_completed: bool = False
    discarded_corrupt: bool = False

    @property
    def restored(self) -> bool:
        return self.restored_responses > 0

    @property
    def message(self) -> str | None:
        """One-time notice shown when answers were restored."""

        if not self.restored:
            return None
        return RESTORED_MESSAGE.format(timestamp=format_timestamp(self.timestamp))


def format_timestamp(value: str | None) -> str:
    """Render an ISO timestamp in local time, falling back to the raw text."""

    if not value:
        return "an earlier session"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def apply_response(form: RenderedForm, key: str, value: AnswerValue) -> bool:
    """Replay one snapshot entry onto the matching element."""

    if key.endswith(ElementNames.OTHER_SNAPSHOT_SUFFIX):
        base_key = key[: -len(ElementNames.OTHER_SNAPSHOT_SUFFIX)]
        other_radio = form.radio_option(base_key, ElementNames.OTHER_VALUE)
        if other_radio is not None and other_radio.companion is not None:
            other_radio.companion.value = str(value)
            return True
        # Fall through: a question id may itself end in "_other".

    element = form.element_by_id(key)
    if element is None:
        named = form.elements_named(key)
        element = named[0] if named else None
    if element is None:
        return False

    if element.type is InputType.CHECKBOX:
        element.checked = bool(value)
        return True
    if element.type is InputType.RADIO:
        option = form.radio_option(key, str(value))
        if option is None:
            return False
        form.check(option)
        return True
    element.value = str(value)
    return True


def _apply_snapshot(form: RenderedForm, navigator: Navigator, snapshot: PersistedSnapshot) -> int:
    if snapshot.current_page is not None:
        navigator.jump_to(snapshot.current_page)
    applied = 0
    for key, value in snapshot.responses.items():
        if apply_response(form, key, value):
            applied += 1
        else:
            logger.debug("No element matches saved response %s", key)
    return applied


def resume_session(form: RenderedForm, navigator: Navigator, store: PersistenceStore) -> ResumeResult:
    """Rehydrate ``navigator`` and widgets from ``store``.

    A completed study is never resumed: both records are removed and the
    wizard starts on page 1. A malformed snapshot is logged and deleted.
    """

    if is_completed(store):
        clear_all(store)
        logger.info("Previous study was completed; starting fresh")
        return ResumeResult(discarded_completed=True)

    try:
        snapshot = read_snapshot(store)
    except SnapshotError as exc:
        logger.error("Error loading saved data: %s", exc)
        clear_snapshot(store)
        return ResumeResult(discarded_corrupt=True)
    if snapshot is None:
        return ResumeResult()

    _apply_snapshot(form, navigator, snapshot)
    restored_page = navigator.current_page if navigator.current_page > 1 else None
    return ResumeResult(
        restored_page=restored_page,
        restored_responses=len(snapshot.responses),
        timestamp=snapshot.timestamp,
    )


__all__ = ["RESTORED_MESSAGE", "ResumeResult", "apply_response", "format_timestamp", "resume_session"]
