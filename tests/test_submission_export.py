import json
from pathlib import Path

from exports.submission import serialize_submission, submission_filename, write_submission
from models.records import SubmissionDocument


def _document() -> SubmissionDocument:
    return SubmissionDocument(
        submission_time="2024-03-01T12:00:00.000Z",
        session_id="study_1_abc",
        responses={"q_1_Ünïcode": "café", "q_2_Agree": True},
    )


def test_filename() -> None:
    assert submission_filename("study_1_abc") == "user_study_study_1_abc.json"


def test_serialized_payload_is_pretty_utf8() -> None:
    payload = serialize_submission(_document())

    text = payload.decode("utf-8")
    assert text.startswith('{\n  "submissionTime"')
    assert "café" in text
    assert json.loads(text)["responses"]["q_2_Agree"] is True


def test_write_submission_creates_directory(tmp_path: Path) -> None:
    target = tmp_path / "exports" / "2024"

    path = write_submission(_document(), target)

    assert path == target / "user_study_study_1_abc.json"
    assert json.loads(path.read_text(encoding="utf-8"))["sessionId"] == "study_1_abc"
