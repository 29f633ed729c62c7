"""Tests for logging functionality."""

from __future__ import annotations

import io
import json
import logging
import sys
from pathlib import Path

import structlog

from searcharr.core.logging import (
    LOG_FILE_NAME,
    ExcInfo,
    exception_processor,
    format_exception_for_json,
    setup_logging,
)


def test_format_exception_for_json_with_exception() -> None:
    """Test format_exception_for_json with a real exception."""
    try:
        raise ValueError("Test error message")
    except ValueError:
        exc_info: ExcInfo = sys.exc_info()

    result = format_exception_for_json(exc_info)

    assert result["exception_type"] == "ValueError"
    assert result["exception_message"] == "Test error message"
    assert result["exception_module"] == "builtins"
    frame = result["traceback_frames"][0]
    assert frame["function"] == "test_format_exception_for_json_with_exception"
    assert isinstance(frame["lineno"], int)
    assert "raise ValueError" in frame["source_line"]
    assert "ValueError: Test error message" in result["traceback_text"]


def test_format_exception_for_json_without_exception() -> None:
    """Test format_exception_for_json with no exception."""
    assert format_exception_for_json(None) == {}
    assert format_exception_for_json((None, None, None)) == {}


def test_exception_processor_accepts_exception_instance() -> None:
    """Test that an exception passed as exc_info is structured."""
    try:
        raise KeyError("missing")
    except KeyError as e:
        event_dict = exception_processor(None, "error", {"event": "boom", "exc_info": e})

    assert "exc_info" not in event_dict
    assert event_dict["exception"]["exception_type"] == "KeyError"
    assert event_dict["exception_summary"] == "KeyError: 'missing'"


def test_exception_processor_without_exception() -> None:
    """Test that events without exception info pass through unchanged."""
    assert exception_processor(None, "info", {"event": "ok"}) == {"event": "ok"}


def test_setup_logging_debug_mode() -> None:
    """Test setup_logging in debug mode."""
    setup_logging(debug=True)

    assert logging.getLogger().level == logging.DEBUG
    structlog.get_logger("test.logger").debug("Test message", key="value")


def test_exception_logging_in_json(monkeypatch) -> None:
    """Test that exceptions are logged in structured JSON format."""
    output = io.StringIO()
    monkeypatch.setattr(sys, "stdout", output)
    setup_logging(debug=False)
    logger = structlog.get_logger("test.logger")

    try:
        raise ValueError("Test error")
    except ValueError:
        logger.exception("An error occurred", extra="context")

    json_lines = [line for line in output.getvalue().splitlines() if line.startswith("{")]
    log_data = json.loads(json_lines[-1])
    assert log_data["event"] == "An error occurred"
    assert log_data["level"] == "error"
    assert log_data["exception"]["exception_type"] == "ValueError"
    assert log_data["exception_summary"] == "ValueError: Test error"


def test_setup_logging_to_file(tmp_path: Path) -> None:
    """Test that logs go to a JSON file when a logs directory is given."""
    logs_dir = tmp_path / "logs"
    setup_logging(debug=True, logs_dir=logs_dir)

    structlog.get_logger("test.logger").info("File message", indexer="alpha")
    for handler in logging.getLogger().handlers:
        handler.flush()

    lines = (logs_dir / LOG_FILE_NAME).read_text(encoding="utf-8").splitlines()
    log_data = json.loads(lines[-1])
    assert log_data["event"] == "File message"
    assert log_data["indexer"] == "alpha"

    setup_logging(debug=False)
