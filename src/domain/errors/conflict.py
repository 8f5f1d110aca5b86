"""Conflict errors: the request is well-formed but clashes with current state.

Typical cases are a user who already has a waiting request, an exhausted
direct-response quota, a queue item that has already moved on in its
lifecycle, or a vote on a proposal that has already been decided.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from src.domain.exceptions import FacilitationError

if TYPE_CHECKING:
    from src.domain.models.proposal import ProposalStatus
    from src.domain.models.queue_item import QueueItemStatus


class ConflictError(FacilitationError):
    """Base class for requests that conflict with current state."""


class AlreadyInQueueError(ConflictError):
    """Raised when a user joins while already holding a WAITING item.

    Attributes:
        meeting_id: Meeting joined.
        user_id: User already on the stack.
        existing_item_id: The WAITING item the user already holds.
    """

    def __init__(self, meeting_id: UUID, user_id: UUID, existing_item_id: UUID) -> None:
        self.meeting_id = meeting_id
        self.user_id = user_id
        self.existing_item_id = existing_item_id
        super().__init__(
            f"User {user_id} already has a waiting item {existing_item_id} "
            f"in meeting {meeting_id}"
        )


class DirectResponseLimitExceededError(ConflictError):
    """Raised when a user has used up their direct responses.

    Attributes:
        meeting_id: Meeting joined.
        user_id: Rate-limited user.
        current_count: Direct responses raised within the lookback window.
        limit: Allowed direct responses per window.
        retry_at: Earliest time a slot frees up, if known.
    """

    def __init__(
        self,
        meeting_id: UUID,
        user_id: UUID,
        current_count: int,
        limit: int,
        retry_at: datetime | None = None,
    ) -> None:
        self.meeting_id = meeting_id
        self.user_id = user_id
        self.current_count = current_count
        self.limit = limit
        self.retry_at = retry_at
        retry = f" Retry after {retry_at.isoformat()}." if retry_at else ""
        super().__init__(
            f"Direct response limit exceeded for user {user_id}: "
            f"{current_count}/{limit}.{retry}"
        )


class InvalidQueueTransitionError(ConflictError):
    """Raised when a queue item is not in the status an operation requires.

    Attributes:
        item_id: Item targeted.
        current_status: Status the item is in.
        required_status: Status the operation needs.
        operation: Name of the rejected operation.
    """

    def __init__(
        self,
        item_id: UUID,
        current_status: QueueItemStatus,
        required_status: QueueItemStatus,
        operation: str,
    ) -> None:
        self.item_id = item_id
        self.current_status = current_status
        self.required_status = required_status
        self.operation = operation
        super().__init__(
            f"Cannot {operation} queue item {item_id}: status is "
            f"{current_status.value}, expected {required_status.value}"
        )


class ProposalNotActiveError(ConflictError):
    """Raised when voting on or withdrawing a proposal that is decided.

    Attributes:
        proposal_id: Proposal targeted.
        status: Its current status.
    """

    def __init__(self, proposal_id: UUID, status: ProposalStatus) -> None:
        self.proposal_id = proposal_id
        self.status = status
        super().__init__(
            f"Proposal {proposal_id} is not active (status: {status.value})"
        )


class AlreadyParticipantError(ConflictError):
    """Raised when an active participant joins the same meeting again."""

    def __init__(self, meeting_id: UUID, user_id: UUID) -> None:
        self.meeting_id = meeting_id
        self.user_id = user_id
        super().__init__(f"User {user_id} already joined meeting {meeting_id}")


class PinAllocationError(ConflictError):
    """Raised when no unused meeting PIN was found within the allowed attempts."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Could not allocate an unused meeting PIN after {attempts} attempts")
