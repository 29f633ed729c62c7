"""Trace IDs for search runs using structlog contextvars."""

from __future__ import annotations

import uuid
from collections.abc import Generator
from contextlib import contextmanager

import structlog.contextvars as contextvars


def generate_trace_id() -> str:
    """Generate a unique trace ID.

    Returns:
        Hexadecimal trace ID (32 characters)
    """
    return uuid.uuid4().hex


def get_trace_id() -> str | None:
    return contextvars.get_contextvars().get("trace_id")


def set_trace_id(trace_id: str) -> None:
    contextvars.bind_contextvars(trace_id=trace_id)


def clear_trace_id() -> None:
    contextvars.unbind_contextvars("trace_id")


@contextmanager
def trace_context(trace_id: str | None = None) -> Generator[str]:
    """Bind a trace ID for the duration of the block.

    Every log line emitted inside the block carries the trace ID; the
    previous trace ID (if any) is restored on exit.

    Args:
        trace_id: Trace ID to use. If None, a new one is generated.

    Yields:
        The trace ID being used
    """
    previous = get_trace_id()
    if trace_id is None:
        trace_id = generate_trace_id()
    set_trace_id(trace_id)
    try:
        yield trace_id
    finally:
        if previous is None:
            clear_trace_id()
        else:
            set_trace_id(previous)
