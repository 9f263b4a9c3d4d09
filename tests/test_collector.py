import random
import re
from datetime import datetime, timezone

from models.form import parse_form_document
from wizard.collector import (
    build_snapshot,
    build_submission,
    collect_snapshot_responses,
    collect_submission_responses,
    generate_session_id,
)
from wizard.dom import RenderedForm, build_rendered_form
from wizard.registry import QuestionTitleIndex

WHEN = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_session_id_format() -> None:
    session_id = generate_session_id(now_ms=1_700_000_000_000, rng=random.Random(7))

    assert re.fullmatch(r"study_1700000000000_[0-9a-z]{9}", session_id)
    assert session_id == generate_session_id(now_ms=1_700_000_000_000, rng=random.Random(7))


def test_single_page_submission() -> None:
    document = parse_form_document(
        {
            "title": "Mini",
            "pages": [
                {
                    "pageNumber": 1,
                    "questions": [
                        {"id": "1", "title": "Agree", "type": "checkbox", "required": True, "options": [{"value": "Yes"}]},
                        {"id": "2", "title": "Name", "type": "text"},
                    ],
                }
            ],
        }
    )
    form = build_rendered_form(document)
    form.element_by_id("q_2").value = "hello"  # type: ignore[union-attr]

    submission = build_submission(
        form,
        QuestionTitleIndex.from_form(form),
        session_id_factory=lambda: "study_1_abc",
        when=WHEN,
    )

    assert submission.to_payload() == {
        "submissionTime": "2024-03-01T12:00:00.000Z",
        "sessionId": "study_1_abc",
        "responses": {"q_1_Agree": False, "q_2_Name": "hello"},
    }


def test_submission_spans_all_pages(rendered_form: RenderedForm) -> None:
    rendered_form.element_by_id("q_100").checked = True  # type: ignore[union-attr]
    rendered_form.check(rendered_form.radio_option("q_201", "5"))  # type: ignore[arg-type]
    rendered_form.element_by_id("q_302").value = "Lovely"  # type: ignore[union-attr]

    responses = collect_submission_responses(rendered_form, QuestionTitleIndex.from_form(rendered_form))

    assert responses == {
        "q_101_Your name": "",
        "q_302_Comments": "Lovely",
        "q_100_I consent to take part": True,
        "q_300_0_Features you use": False,
        "q_300_1_Features you use": False,
        "q_201_How much do you enjoy parks?": "5",
    }


def test_other_selection_with_free_text(rendered_form: RenderedForm) -> None:
    other = rendered_form.radio_option("q_200", "other")
    rendered_form.check(other)  # type: ignore[arg-type]
    other.companion.value = "Lake Park"  # type: ignore[union-attr]

    responses = collect_submission_responses(rendered_form, QuestionTitleIndex.from_form(rendered_form))

    assert responses["q_200_Favourite park"] == "Lake Park"
    assert responses["q_200_Favourite park (Other)"] == "Lake Park"


def test_other_selection_without_free_text(rendered_form: RenderedForm) -> None:
    rendered_form.check(rendered_form.radio_option("q_200", "other"))  # type: ignore[arg-type]

    responses = collect_submission_responses(rendered_form, QuestionTitleIndex.from_form(rendered_form))

    assert responses["q_200_Favourite park"] == "other"
    assert responses["q_200_Favourite park (Other)"] == ""


def test_snapshot_uses_raw_keys(rendered_form: RenderedForm) -> None:
    rendered_form.element_by_id("q_101").value = "Ada"  # type: ignore[union-attr]
    other = rendered_form.radio_option("q_200", "other")
    rendered_form.check(other)  # type: ignore[arg-type]
    other.companion.value = "Lake Park"  # type: ignore[union-attr]

    snapshot = build_snapshot(rendered_form, 2, when=WHEN)

    assert snapshot.current_page == 2
    assert snapshot.timestamp == "2024-03-01T12:00:00.000Z"
    assert snapshot.responses == {
        "q_101": "Ada",
        "q_100": False,
        "q_300_0": False,
        "q_300_1": False,
        "q_200": "other",
        "q_200_other": "Lake Park",
    }


def test_snapshot_skips_empty_text(rendered_form: RenderedForm) -> None:
    responses = collect_snapshot_responses(rendered_form)

    assert "q_101" not in responses
    assert "q_302" not in responses
