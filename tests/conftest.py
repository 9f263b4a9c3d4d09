from pathlib import Path
import copy
import sys
from typing import Any

import streamlit as st

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models.form import FormDocument, parse_form_document  # noqa: E402
from wizard.dom import RenderedForm, build_rendered_form  # noqa: E402


SAMPLE_FORM: dict[str, Any] = {
    "title": "Park Study",
    "description": "Thank you for taking part.",
    "pages": [
        {
            "pageNumber": 1,
            "title": "Welcome",
            "description": "Please read the consent form.",
            "questions": [
                {
                    "id": 100,
                    "title": "I consent to take part",
                    "type": "checkbox",
                    "required": True,
                    "options": [{"value": "Yes"}],
                },
                {"id": "101", "title": "Your name", "type": "text"},
            ],
        },
        {
            "pageNumber": 2,
            "title": "Favourite places",
            "questions": [
                {
                    "id": "200",
                    "title": "Favourite park",
                    "type": "radio",
                    "required": True,
                    "hasOther": True,
                    "options": [
                        {"value": "North Park"},
                        {"value": "South Park"},
                        {"value": "", "isOther": True},
                    ],
                },
                {
                    "id": "201",
                    "title": "How much do you enjoy parks?",
                    "type": "scale",
                    "scale": {
                        "lowerBound": 1,
                        "upperBound": 5,
                        "lowerLabel": "Not at all",
                        "upperLabel": "A lot",
                    },
                },
            ],
        },
        {
            "pageNumber": 3,
            "title": "Wrap up",
            "questions": [
                {
                    "id": "300",
                    "title": "Features you use",
                    "type": "checkbox",
                    "options": [{"value": "Benches"}, {"value": "Trails"}],
                },
                {
                    "id": "301",
                    "title": "Almost done",
                    "type": "section_header",
                    "description": "A final question.",
                },
                {"id": "302", "title": "Comments", "type": "text"},
            ],
        },
    ],
}

_STUDY_ENV_VARS = (
    "STUDY_FORM_PATH",
    "STUDY_MARKUP_PATH",
    "STUDY_STORE_BACKEND",
    "STUDY_STORE_DIR",
    "STUDY_EXPORT_DIR",
    "STUDY_AUTOSAVE_INTERVAL",
    "STUDY_CONSENT_ELEMENT_ID",
    "STUDY_EVALUATION_PAGES",
    "STUDY_SELECTION_SUFFIXES",
    "STUDY_LOG_LEVEL",
    "STUDY_DEBUG",
    "GOOGLE_FORMS_ACCESS_TOKEN",
)


class _SessionDict(dict[str, object]):
    """Lightweight replacement for ``st.session_state`` during tests."""

    def clear(self) -> None:  # type: ignore[override]
        super().clear()


@pytest.fixture(autouse=True)
def _stub_streamlit_session_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace Streamlit's runtime-bound session state with a plain dictionary."""

    session_state = _SessionDict()
    monkeypatch.setattr(st, "session_state", session_state, raising=False)
    yield


@pytest.fixture(autouse=True)
def _isolate_study_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear study environment variables for every test."""

    for name in _STUDY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def form_payload() -> dict[str, Any]:
    return copy.deepcopy(SAMPLE_FORM)


@pytest.fixture
def sample_document(form_payload: dict[str, Any]) -> FormDocument:
    return parse_form_document(form_payload)


@pytest.fixture
def rendered_form(sample_document: FormDocument) -> RenderedForm:
    return build_rendered_form(sample_document)
