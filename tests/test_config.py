from __future__ import annotations

import logging
from pathlib import Path

import pytest

from todolist.config import load_settings
from todolist.logging_setup import setup_logging
from todolist.reporting import CollectingReporter, LoggingReporter


def test_defaults_have_no_data_file() -> None:
    settings = load_settings({})
    assert settings.data_dir == Path(".")
    assert settings.data_file is None
    assert settings.log_level == "WARNING"
    assert settings.log_file is None


def test_settings_from_environment(tmp_path: Path) -> None:
    settings = load_settings(
        {
            "TODOLIST_DATA_DIR": str(tmp_path),
            "TODOLIST_FILE": "tasks.json",
            "TODOLIST_LOG_LEVEL": "debug",
            "TODOLIST_LOG_FILE": str(tmp_path / "todolist.log"),
        }
    )
    assert settings.data_dir == tmp_path
    assert settings.data_file == "tasks.json"
    assert settings.log_level == "DEBUG"
    assert settings.log_file == tmp_path / "todolist.log"


def test_blank_values_are_unset() -> None:
    settings = load_settings({"TODOLIST_FILE": "   ", "TODOLIST_DATA_DIR": ""})
    assert settings.data_file is None
    assert settings.data_dir == Path(".")


def test_logging_reporter_routes_by_severity(caplog: pytest.LogCaptureFixture) -> None:
    reporter = LoggingReporter()
    with caplog.at_level(logging.INFO, logger="todolist.reporting"):
        reporter.show_message("saved", False)
        reporter.show_message("broken", True)
    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.INFO, "saved"),
        (logging.ERROR, "broken"),
    ]


def test_collecting_reporter_keeps_errors() -> None:
    reporter = CollectingReporter()
    reporter.show_message("note", False)
    reporter.show_message("bad", True)
    assert reporter.errors == ["bad"]
    assert reporter.messages == [("note", False), ("bad", True)]


def test_setup_logging_writes_log_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    log_file = tmp_path / "logs" / "todolist.log"
    try:
        setup_logging(level=logging.ERROR, log_file=log_file)
        logging.getLogger("todolist.test").debug("hello file")
        for handler in root.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
