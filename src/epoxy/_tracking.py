"""Dependency tracer — discovers what a computed getter reads.

Uses a contextvar to hold the buffer of the trace currently being recorded.
While a trace is active, every Model.get() appends a (name, model) descriptor
to it, so a computed property's dependency set is exactly the set of
properties its getter read on its first run.

Traces nest: entering a trace while another is active shadows the outer one,
and leaving it restores the outer trace.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from epoxy.dependency import RemoteDependency

if TYPE_CHECKING:
    from epoxy.base import AttributeModel

# Buffer of the trace being recorded, or None when no trace is active.
current_trace: contextvars.ContextVar[list | None] = contextvars.ContextVar(
    "current_trace", default=None
)


@contextmanager
def tracing(buffer: list) -> Iterator[list]:
    """Record every model read made inside the block into buffer."""
    token = current_trace.set(buffer)
    try:
        yield buffer
    finally:
        current_trace.reset(token)


def record(name: str, model: AttributeModel) -> None:
    """Append a read to the active trace. No-op when nothing is tracing."""
    buffer = current_trace.get()
    if buffer is not None:
        buffer.append(RemoteDependency(name, model))


def is_tracing() -> bool:
    """Whether a trace is currently recording. Useful for testing."""
    return current_trace.get() is not None
