"""Observability infrastructure for structured logging.

This module provides cross-cutting observability concerns:
- Structured JSON logging with structlog
- Meeting context binding so log entries carry the meeting id

Usage:
    from src.infrastructure.observability import (
        bind_meeting_context,
        configure_structlog,
    )

    # At startup
    configure_structlog(environment="production")

    # In request handling
    with bind_meeting_context(meeting_id):
        ...
"""

from src.infrastructure.observability.logging import configure_structlog
from src.infrastructure.observability.meeting_context import (
    bind_meeting_context,
    get_meeting_context,
    meeting_context_processor,
)

__all__: list[str] = [
    "bind_meeting_context",
    "configure_structlog",
    "get_meeting_context",
    "meeting_context_processor",
]
