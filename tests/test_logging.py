import json
import logging
import tempfile
from pathlib import Path
from typing import Iterator

import pytest

import infra.logging as infra_logging
from config import get_settings
from infra.logging import configure_logging, log_event


def test_log_event_emits_json(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="study_wizard"):
        path = log_event("submit", session_id="study_1_abc", page=3, detail="responses=4")

    assert path == ""
    record = json.loads(caplog.records[-1].getMessage())
    assert record == {
        "event": "submit",
        "level": "info",
        "session_id": "study_1_abc",
        "page": 3,
        "detail": "responses=4",
    }


def test_log_event_respects_level(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="study_wizard"):
        log_event("navigate", level="debug", page=2)

    assert caplog.records == []


@pytest.fixture
def dump_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    monkeypatch.setattr(infra_logging, "_debug_payloads", False)
    root = logging.getLogger()
    previous = root.level
    yield tmp_path
    root.setLevel(previous)


def test_debug_payload_dump(dump_dir: Path) -> None:
    configure_logging("info", debug=get_settings({"STUDY_DEBUG": "1"}).debug)

    path = log_event("submit", payload={"responses": {"q_1_Name": "Ada"}})

    assert Path(path).parent == dump_dir
    assert json.loads(Path(path).read_text())["responses"]["q_1_Name"] == "Ada"


@pytest.mark.parametrize("flag", ["0", "false", "off", ""])
def test_falsy_debug_flag_skips_payload_dump(dump_dir: Path, flag: str) -> None:
    configure_logging("info", debug=get_settings({"STUDY_DEBUG": flag}).debug)

    path = log_event("submit", payload={"responses": {"q_1_Name": "Ada"}})

    assert path == ""
    assert list(dump_dir.iterdir()) == []


def test_configure_logging_sets_root_level() -> None:
    root = logging.getLogger()
    previous = root.level
    try:
        configure_logging("warning")
        assert root.level == logging.WARNING
        configure_logging(logging.DEBUG)
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)
