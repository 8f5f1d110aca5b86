"""Not-found errors for unknown meetings, items, proposals, participants and incidents."""

from __future__ import annotations

from uuid import UUID

from src.domain.exceptions import FacilitationError


class NotFoundError(FacilitationError):
    """Base class for lookups of records that do not exist.

    Attributes:
        resource: Kind of record looked up.
        identifier: The identifier that matched nothing.
    """

    resource = "record"

    def __init__(self, identifier: object) -> None:
        self.identifier = identifier
        super().__init__(f"{self.resource.capitalize()} not found: {identifier}")


class MeetingNotFoundError(NotFoundError):
    """Raised for an unknown meeting id or PIN."""

    resource = "meeting"


class QueueItemNotFoundError(NotFoundError):
    resource = "queue item"


class ProposalNotFoundError(NotFoundError):
    resource = "proposal"


class ParticipantNotFoundError(NotFoundError):
    """Raised when a (meeting, user) pair has no participant record."""

    resource = "participant"

    def __init__(self, meeting_id: UUID, user_id: UUID) -> None:
        self.meeting_id = meeting_id
        self.user_id = user_id
        super().__init__(f"user {user_id} in meeting {meeting_id}")


class IncidentNotFoundError(NotFoundError):
    resource = "incident"
