"""Meeting context for log entries.

Binds the meeting a request is working on into a contextvar so that
every log entry written while handling it carries ``meeting_id``, across
async boundaries, without each service binding it by hand.

Usage:
    # At the start of handling a request for a meeting
    with bind_meeting_context(meeting_id):
        await lifecycle.join(meeting_id, user_id, "HAND")

    # In structlog configuration
    processors = [..., meeting_context_processor, ...]
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import UUID

# Empty string means no meeting is bound
_meeting_id: ContextVar[str] = ContextVar("meeting_id", default="")


def get_meeting_context() -> str:
    """Return the bound meeting id, or an empty string if none is bound."""
    return _meeting_id.get()


@contextmanager
def bind_meeting_context(meeting_id: UUID | str) -> Iterator[None]:
    """Bind ``meeting_id`` for the duration of the block.

    The previous value is restored on exit, so nested bindings unwind
    correctly.

    Args:
        meeting_id: The meeting being worked on.
    """
    token = _meeting_id.set(str(meeting_id))
    try:
        yield
    finally:
        _meeting_id.reset(token)


def meeting_context_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor to add meeting_id to every log entry.

    An explicitly bound ``meeting_id`` on the entry wins over the context.

    Args:
        logger: The logger instance (unused, required by structlog).
        method_name: The logging method name (unused, required by structlog).
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with meeting_id added when one is bound.
    """
    meeting_id = get_meeting_context()
    if meeting_id:
        event_dict.setdefault("meeting_id", meeting_id)
    return event_dict
