"""Permission errors for role and ownership checks.

Named PermissionDeniedError so the builtin PermissionError (an OSError)
is never shadowed.
"""

from __future__ import annotations

from uuid import UUID

from src.domain.exceptions import FacilitationError


class PermissionDeniedError(FacilitationError):
    """Base class for callers lacking the role or ownership required."""


class FacilitatorRequiredError(PermissionDeniedError):
    """Raised when a non-facilitator attempts a facilitator-only operation.

    Attributes:
        meeting_id: Meeting in which the role was required.
        user_id: Caller lacking the role.
        operation: Name of the rejected operation.
    """

    def __init__(self, meeting_id: UUID, user_id: UUID, operation: str) -> None:
        self.meeting_id = meeting_id
        self.user_id = user_id
        self.operation = operation
        super().__init__(
            f"Facilitator permission required to {operation} "
            f"(user {user_id}, meeting {meeting_id})"
        )


class NotItemOwnerError(PermissionDeniedError):
    """Raised when a user other than the owner or a facilitator removes an item."""

    def __init__(self, item_id: UUID, user_id: UUID) -> None:
        self.item_id = item_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id} may not remove queue item {item_id}: "
            "only its owner or a facilitator can"
        )


class NotParticipantError(PermissionDeniedError):
    """Raised when a user who is not an active participant acts in a meeting."""

    def __init__(self, meeting_id: UUID, user_id: UUID) -> None:
        self.meeting_id = meeting_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id} is not an active participant of meeting {meeting_id}"
        )


class NotProposerError(PermissionDeniedError):
    """Raised when someone other than the proposer withdraws a proposal."""

    def __init__(self, proposal_id: UUID, user_id: UUID) -> None:
        self.proposal_id = proposal_id
        self.user_id = user_id
        super().__init__(
            f"Only the proposer can withdraw proposal {proposal_id} (user {user_id})"
        )
