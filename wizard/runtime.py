"""Wizard runtime wiring navigation, validation, persistence and export."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from config import DEFAULT_AUTOSAVE_INTERVAL, StudySettings
from core.errors import FormDocumentError
from exports.submission import serialize_submission, submission_filename, write_submission
from infra.logging import log_event
from models.form import FormDocument
from models.records import PersistedSnapshot, SubmissionDocument
from state.autosave import AutosaveScheduler
from state.records import clear_all, clear_snapshot, mark_completed, save_snapshot
from state.store import PersistenceStore
from wizard.collector import build_snapshot, build_submission, generate_session_id
from wizard.dom import InputElement, InputType, RenderedForm, build_rendered_form
from wizard.navigation import Navigator, WizardState
from wizard.registry import QuestionTitleIndex
from wizard.resume import ResumeResult, resume_session
from wizard.validation import ValidationPolicy, validate_all, validate_page

logger = logging.getLogger(__name__)

COMPLETION_PROMPT = (
    "Thank you for participating in our form! Your responses have been submitted and downloaded.\n\n"
    "Would you like to reset the form for a new participant?"
)
RESET_MESSAGE = "Study has been reset. Ready for a new participant!"


@dataclass(frozen=True)
class SubmissionResult:
    """Everything the front-end needs to offer the exported file."""

    document: SubmissionDocument
    filename: str
    payload: bytes
    saved_path: Path | None = None
    reset_performed: bool = False


class StudyWizard:
    """One participant session of the study wizard.

    User edits go through :meth:`set_text`, :meth:`set_checked` and
    :meth:`select_radio`; each re-validates the edited page and saves. Page
    transitions save as well, and :attr:`autosave` covers the periodic,
    visibility and unload triggers.
    """

    def __init__(
        self,
        form: RenderedForm,
        store: PersistenceStore,
        *,
        policy: ValidationPolicy | None = None,
        autosave_interval: float = DEFAULT_AUTOSAVE_INTERVAL,
        export_dir: str | Path | None = None,
        clock: Callable[[], float] = time.monotonic,
        notify: Callable[[str], None] | None = None,
        session_id_factory: Callable[[], str] = generate_session_id,
    ) -> None:
        if form.total_pages < 1:
            raise FormDocumentError("the rendered form has no pages")
        self.form = form
        self.store = store
        self.policy = policy or ValidationPolicy()
        self.navigator = Navigator(form, on_transition=self._after_transition)
        self.autosave = AutosaveScheduler(self.save, interval_seconds=autosave_interval, clock=clock)
        self.titles = QuestionTitleIndex({})
        self.resume_result: ResumeResult | None = None
        self._export_dir = Path(export_dir) if export_dir else None
        self._notify = notify
        self._session_id_factory = session_id_factory

    @classmethod
    def from_document(
        cls,
        document: FormDocument,
        store: PersistenceStore,
        *,
        settings: StudySettings | None = None,
        **kwargs: object,
    ) -> "StudyWizard":
        """Render ``document`` and build a wizard configured from ``settings``."""

        if settings is not None:
            policy = ValidationPolicy.from_settings(document, settings)
            kwargs.setdefault("autosave_interval", settings.autosave_interval)
            kwargs.setdefault("export_dir", settings.export_dir)
        else:
            policy = ValidationPolicy.from_document(document)
        kwargs.setdefault("policy", policy)
        form = build_rendered_form(document, gated_pages=policy.gated_pages(document.total_pages))
        return cls(form, store, **kwargs)  # type: ignore[arg-type]

    @property
    def state(self) -> WizardState:
        return self.navigator.state

    @property
    def current_page(self) -> int:
        return self.navigator.current_page

    @property
    def started(self) -> bool:
        return self.resume_result is not None

    def start(self) -> ResumeResult:
        """Build the title index, resume saved state, validate and arm autosave."""

        if self.resume_result is not None:
            return self.resume_result
        self.titles = QuestionTitleIndex.from_form(self.form)
        result = resume_session(self.form, self.navigator, self.store)
        self.navigator.refresh_indicator()
        validate_all(self.form, self.policy)
        self.autosave.arm()
        self.resume_result = result
        log_event(
            "resume",
            page=self.current_page,
            detail=(
                "completed-discarded"
                if result.discarded_completed
                else "corrupt-discarded" if result.discarded_corrupt else f"restored={result.restored_responses}"
            ),
        )
        if result.message:
            self._emit(result.message)
        return result

    def save(self) -> PersistedSnapshot | None:
        """Write the current snapshot; storage failures are logged, not raised."""

        snapshot = build_snapshot(self.form, self.current_page)
        try:
            save_snapshot(self.store, snapshot)
        except OSError as exc:
            logger.warning("Unable to save study progress: %s", exc)
            return None
        log_event("save", level="debug", page=self.current_page, detail=f"responses={len(snapshot.responses)}")
        return snapshot

    # -- user edits -------------------------------------------------------

    def _require_input(self, uid: str) -> InputElement | None:
        element = self.form.input(uid)
        if element is None:
            logger.debug("Ignoring edit for unknown input %s", uid)
        return element

    def set_text(self, uid: str, value: str) -> bool:
        element = self._require_input(uid)
        if element is None or element.type is not InputType.TEXT:
            return False
        element.value = value or ""
        self._after_input(element)
        return True

    def set_checked(self, uid: str, checked: bool) -> bool:
        element = self._require_input(uid)
        if element is None or not element.is_toggle:
            return False
        self.form.check(element, bool(checked))
        self._after_input(element)
        return True

    def select_radio(self, name: str, value: str | None) -> bool:
        """Check the option ``value`` of group ``name``; ``None`` clears the group."""

        options = [element for element in self.form.elements_named(name) if element.type is InputType.RADIO]
        if not options:
            return False
        if value is None:
            for option in options:
                option.checked = False
            self._after_input(options[0])
            return True
        target = self.form.radio_option(name, value)
        if target is None:
            return False
        self.form.check(target)
        self._after_input(target)
        return True

    def _after_input(self, element: InputElement) -> None:
        validate_page(self.form, element.page_number, self.policy)
        self.autosave.on_input_change()

    # -- navigation -------------------------------------------------------

    def can_advance(self) -> bool:
        page = self.form.page(self.current_page)
        return page is not None and page.next_enabled

    def next_page(self) -> bool:
        return self.navigator.advance()

    def prev_page(self) -> bool:
        return self.navigator.retreat()

    def _after_transition(self, state: WizardState) -> None:
        log_event("navigate", level="debug", page=state.current_page)
        self.save()

    # -- submission and reset --------------------------------------------

    def submit(self, *, confirm: Callable[[str], bool] | None = None) -> SubmissionResult:
        """Collect every page's answers, mark completion and export the file.

        ``confirm`` receives the completion prompt; answering ``True`` resets
        the wizard for the next participant.
        """

        document = build_submission(self.form, self.titles, session_id_factory=self._session_id_factory)
        mark_completed(self.store)
        payload = serialize_submission(document)
        saved_path = write_submission(document, self._export_dir) if self._export_dir else None
        clear_snapshot(self.store)
        log_event(
            "submit",
            session_id=document.session_id,
            page=self.current_page,
            detail=f"responses={len(document.responses)}",
            payload=document.to_payload(),
        )
        reset_performed = False
        if confirm is not None and confirm(COMPLETION_PROMPT):
            self.reset()
            reset_performed = True
        return SubmissionResult(
            document=document,
            filename=submission_filename(document.session_id),
            payload=payload,
            saved_path=saved_path,
            reset_performed=reset_performed,
        )

    def reset(self) -> None:
        """Start over for a new participant."""

        clear_all(self.store)
        self.navigator.reset()
        self.form.clear_inputs()
        validate_all(self.form, self.policy)
        self.navigator.refresh_indicator()
        log_event("reset", page=self.current_page)
        self._emit(RESET_MESSAGE)

    def _emit(self, message: str) -> None:
        if self._notify is not None:
            self._notify(message)


__all__ = ["COMPLETION_PROMPT", "RESET_MESSAGE", "StudyWizard", "SubmissionResult"]
