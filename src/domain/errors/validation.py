"""Validation errors for malformed requests and unusable meetings.

A ValidationError means the request itself cannot be honoured as given:
an unknown queue item type, a meeting that has already ended, or a value
outside its allowed range. Retrying the same request will fail again.
"""

from __future__ import annotations

from uuid import UUID

from src.domain.exceptions import FacilitationError


class ValidationError(FacilitationError):
    """Base class for invalid input or an invalid target state."""


class InvalidQueueItemTypeError(ValidationError):
    """Raised when a join request names a missing or unknown item type.

    Attributes:
        item_type: The rejected value as received.
    """

    def __init__(self, item_type: object) -> None:
        self.item_type = item_type
        super().__init__(f"Invalid queue item type: {item_type!r}")


class MeetingInactiveError(ValidationError):
    """Raised when an operation targets a meeting that has ended.

    Attributes:
        meeting_id: The inactive meeting.
    """

    def __init__(self, meeting_id: UUID) -> None:
        self.meeting_id = meeting_id
        super().__init__(f"Meeting {meeting_id} is not active")


class InvalidReorderPositionError(ValidationError):
    """Raised when a reorder request asks for a position below 1."""

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(f"Reorder position must be at least 1, got {position}")


class InvalidMeetingSettingsError(ValidationError):
    """Raised when settings overrides are unknown or out of range."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid meeting settings: {detail}")


class InvalidVoteTypeError(ValidationError):
    """Raised when a vote names an unknown vote type."""

    def __init__(self, vote_type: object) -> None:
        self.vote_type = vote_type
        super().__init__(f"Invalid vote type: {vote_type!r}")


class InvalidProposalStatusError(ValidationError):
    """Raised when a status override names an unknown proposal status."""

    def __init__(self, status: object) -> None:
        self.status = status
        super().__init__(f"Invalid proposal status: {status!r}")


class InvalidExportFormatError(ValidationError):
    """Raised when an export names an unsupported format."""

    def __init__(self, export_format: object) -> None:
        self.export_format = export_format
        super().__init__(f"Unsupported export format: {export_format!r}")


class InvalidIncidentReportError(ValidationError):
    """Raised when an incident report has an unknown type or no description.

    Attributes:
        field: The offending field, "type" or "description".
        value: The rejected value as received.
    """

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid incident {field}: {value!r}")


class InvalidIncidentStatusError(ValidationError):
    """Raised when a status update names an unknown incident status."""

    def __init__(self, status: object) -> None:
        self.status = status
        super().__init__(f"Invalid incident status: {status!r}")
