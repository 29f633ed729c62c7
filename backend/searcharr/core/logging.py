"""Logging configuration."""

from __future__ import annotations

import linecache
import logging
import sys
import traceback
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

LOG_FILE_NAME = "searcharr.json.log"

# Exception info tuple as returned by sys.exc_info()
ExcInfo = tuple[type[BaseException] | None, BaseException | None, TracebackType | None]

TracebackFrame = dict[str, str | int | None]

ExceptionDetails = dict[str, None | str | list[TracebackFrame]]


def format_exception_for_json(exc_info: ExcInfo | None) -> ExceptionDetails:
    """Turn exception info into structured fields for JSON logs.

    Args:
        exc_info: Exception info tuple from sys.exc_info() or None

    Returns:
        Dictionary with exception_type, exception_message, exception_module,
        traceback_frames and traceback_text; empty when there is no exception.
    """
    if exc_info is None or exc_info == (None, None, None):
        return {}

    exc_type, exc_value, exc_tb = exc_info
    details: ExceptionDetails = {
        "exception_type": exc_type.__name__ if exc_type else None,
        "exception_message": str(exc_value) if exc_value else None,
        "exception_module": exc_type.__module__ if exc_type else None,
    }

    if exc_tb:
        frames: list[TracebackFrame] = []
        current: TracebackType | None = exc_tb
        while current is not None:
            code = current.tb_frame.f_code
            frame: TracebackFrame = {
                "filename": code.co_filename,
                "lineno": current.tb_lineno,
                "function": code.co_name,
            }
            line = linecache.getline(code.co_filename, current.tb_lineno)
            if line:
                frame["source_line"] = line.strip()
            frames.append(frame)
            current = current.tb_next

        details["traceback_frames"] = frames
        details["traceback_text"] = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))

    return details


def exception_processor(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """structlog processor replacing exc_info with structured exception fields."""
    exc_info = event_dict.pop("exc_info", None)
    if exc_info is True:
        exc_info = sys.exc_info()
    elif isinstance(exc_info, BaseException):
        exc_info = (type(exc_info), exc_info, exc_info.__traceback__)

    if exc_info and exc_info != (None, None, None):
        details = format_exception_for_json(exc_info)
        if details:
            event_dict["exception"] = details
            exc_type = details.get("exception_type")
            exc_msg = details.get("exception_message")
            if exc_type and exc_msg:
                event_dict["exception_summary"] = f"{exc_type}: {exc_msg}"

    return event_dict


def setup_logging(debug: bool = False, logs_dir: Path | None = None) -> None:
    """Setup structured logging with structlog.

    Logs go to stdout (pretty console output in debug, JSON otherwise). When
    logs_dir is given they go to a JSON file in that directory instead.

    Args:
        debug: Enable debug logging and the console renderer
        logs_dir: Optional directory for the JSON log file
    """
    log_level = logging.DEBUG if debug else logging.INFO

    handler: logging.Handler | None = None
    if logs_dir:
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(logs_dir / LOG_FILE_NAME, encoding="utf-8")
        except OSError as e:
            sys.stderr.write(f"Warning: Failed to setup file logging: {e}\n")
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    logging.basicConfig(format="%(message)s", level=log_level, handlers=[handler], force=True)

    processors = [
        structlog.contextvars.merge_contextvars,  # trace_id
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        exception_processor,
    ]
    file_logging = isinstance(handler, logging.FileHandler)
    if debug and not file_logging:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    structlog.get_logger("searcharr.logging").info(
        "Logging configured",
        level=logging.getLevelName(log_level),
        debug=debug,
        log_file=str(logs_dir / LOG_FILE_NAME) if file_logging and logs_dir else None,
    )
