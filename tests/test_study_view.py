import json
import logging
from pathlib import Path

import pytest
import streamlit as st

from config import StoreBackend, StudySettings
from constants.keys import StateKeys
from exports.submission import SUBMISSION_MIME_TYPE
from generators.study_html import render_study_html
from ui import study_view
from wizard.runtime import StudyWizard


def _settings(tmp_path: Path, form_payload: dict) -> StudySettings:
    path = tmp_path / "export.json"
    path.write_text(json.dumps(form_payload), encoding="utf-8")
    return StudySettings(form_path=str(path), store_backend=StoreBackend.MEMORY)


def test_get_wizard_is_cached_per_session(tmp_path: Path, form_payload: dict) -> None:
    settings = _settings(tmp_path, form_payload)

    wizard = study_view.get_wizard(settings)

    assert isinstance(wizard, StudyWizard)
    assert wizard.started
    assert st.session_state[StateKeys.RUNTIME] is wizard
    assert st.session_state[StateKeys.WIDGET_GENERATION] == 0
    assert study_view.get_wizard(settings) is wizard


def test_get_wizard_from_prebuilt_markup(tmp_path: Path, sample_document) -> None:
    from generators.study_html import render_study_html

    markup = tmp_path / "study.html"
    markup.write_text(render_study_html(sample_document, gated_pages=()), encoding="utf-8")
    settings = StudySettings(
        markup_path=str(markup),
        store_backend=StoreBackend.MEMORY,
        consent_element_id="q_100",
    )

    wizard = study_view.get_wizard(settings)

    assert wizard.form.total_pages == 3
    assert wizard.can_advance() is False


def test_notices_are_queued_in_session(tmp_path: Path, form_payload: dict) -> None:
    wizard = study_view.get_wizard(_settings(tmp_path, form_payload))

    wizard.reset()

    assert st.session_state[StateKeys.FLASH_MESSAGE] == ["Study has been reset. Ready for a new participant!"]


def test_scroll_script_only_after_navigation(
    tmp_path: Path, form_payload: dict, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[str] = []
    monkeypatch.setattr(study_view.st, "markdown", lambda body, **_: calls.append(body))
    wizard = study_view.get_wizard(_settings(tmp_path, form_payload))

    study_view.maybe_scroll_to_top(wizard)
    assert calls == []

    wizard.next_page()
    study_view.maybe_scroll_to_top(wizard)
    study_view.maybe_scroll_to_top(wizard)

    assert len(calls) == 1
    assert "scrollIntoView" in calls[0]


def _markup_settings(tmp_path: Path, markup: str, **overrides: object) -> StudySettings:
    path = tmp_path / "study.html"
    path.write_text(markup, encoding="utf-8")
    return StudySettings(markup_path=str(path), store_backend=StoreBackend.MEMORY, **overrides)  # type: ignore[arg-type]


def _uid(wizard: StudyWizard, element_id: str) -> str:
    element = wizard.form.element_by_id(element_id)
    assert element is not None
    return element.uid


def test_markup_wizard_gates_consent_and_evaluation(tmp_path: Path, sample_document) -> None:
    settings = _markup_settings(tmp_path, render_study_html(sample_document))

    wizard = study_view.get_wizard(settings)

    assert wizard.policy.consent_element_id == "q_100"
    assert wizard.can_advance() is False

    wizard.set_checked(_uid(wizard, "q_100"), True)
    assert wizard.can_advance() is True
    assert wizard.next_page() is True

    assert wizard.current_page == 2
    assert wizard.can_advance() is False
    wizard.select_radio("q_201", "5")
    assert wizard.can_advance() is False
    wizard.select_radio("q_200", "North Park")
    assert wizard.can_advance() is True


def test_markup_wizard_with_pinned_evaluation_page(tmp_path: Path, sample_document) -> None:
    settings = _markup_settings(
        tmp_path,
        render_study_html(sample_document, gated_pages={2}),
        evaluation_pages=frozenset({2}),
    )

    wizard = study_view.get_wizard(settings)

    assert wizard.policy.consent_element_id is None
    assert wizard.next_page() is True
    assert wizard.can_advance() is False
    wizard.select_radio("q_200", "North Park")
    assert wizard.can_advance() is True


def test_markup_wizard_leaves_page_without_selection_ungated(
    tmp_path: Path, sample_document, caplog: pytest.LogCaptureFixture
) -> None:
    settings = _markup_settings(
        tmp_path,
        render_study_html(sample_document, gated_pages=()),
        evaluation_pages=frozenset({3}),
    )

    with caplog.at_level(logging.WARNING, logger="wizard.validation"):
        wizard = study_view.get_wizard(settings)

    assert wizard.policy.evaluation_pages == frozenset()
    assert "Evaluation page 3 has no selection inputs" in caplog.text
    assert wizard.next_page() is True
    assert wizard.next_page() is True
    assert wizard.current_page == 3
    assert wizard.can_advance() is True


def test_empty_markup_is_reported(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    errors: list[str] = []
    monkeypatch.setattr(study_view.st, "error", errors.append)
    monkeypatch.setattr(study_view.st, "stop", lambda: None)
    settings = _markup_settings(tmp_path, "<html><body><h1>Empty</h1></body></html>")

    study_view.render_study(settings)

    assert errors == ["The study could not be loaded: the rendered form has no pages"]
    assert StateKeys.RUNTIME not in st.session_state


def test_download_offers_submission_mime_type(
    tmp_path: Path, form_payload: dict, monkeypatch: pytest.MonkeyPatch
) -> None:
    downloads: list[dict] = []
    monkeypatch.setattr(study_view.st, "success", lambda *_args, **_kwargs: None)
    monkeypatch.setattr(study_view.st, "button", lambda *_args, **_kwargs: False)
    monkeypatch.setattr(study_view.st, "download_button", lambda *_args, **kwargs: downloads.append(kwargs))
    wizard = study_view.get_wizard(_settings(tmp_path, form_payload))

    study_view._render_submission(wizard, wizard.submit())

    assert downloads[0]["mime"] == SUBMISSION_MIME_TYPE
    assert downloads[0]["file_name"].startswith("user_study_")


def test_session_state_stub_keeps_dict_semantics() -> None:
    st.session_state[StateKeys.SUBMISSION] = "done"

    assert st.session_state == {StateKeys.SUBMISSION: "done"}
    assert StateKeys.SUBMISSION in repr(st.session_state)
