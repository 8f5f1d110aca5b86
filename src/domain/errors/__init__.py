"""Domain errors for Stack Keeper.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from FacilitationError through one of four
category bases: ValidationError, ConflictError, PermissionDeniedError
and NotFoundError.
"""

from src.domain.errors.conflict import (
    AlreadyInQueueError,
    AlreadyParticipantError,
    ConflictError,
    DirectResponseLimitExceededError,
    InvalidQueueTransitionError,
    PinAllocationError,
    ProposalNotActiveError,
)
from src.domain.errors.not_found import (
    IncidentNotFoundError,
    MeetingNotFoundError,
    NotFoundError,
    ParticipantNotFoundError,
    ProposalNotFoundError,
    QueueItemNotFoundError,
)
from src.domain.errors.permission import (
    FacilitatorRequiredError,
    NotItemOwnerError,
    NotParticipantError,
    NotProposerError,
    PermissionDeniedError,
)
from src.domain.errors.validation import (
    InvalidExportFormatError,
    InvalidIncidentReportError,
    InvalidIncidentStatusError,
    InvalidMeetingSettingsError,
    InvalidProposalStatusError,
    InvalidQueueItemTypeError,
    InvalidReorderPositionError,
    InvalidVoteTypeError,
    MeetingInactiveError,
    ValidationError,
)

__all__: list[str] = [
    # Validation
    "ValidationError",
    "InvalidExportFormatError",
    "InvalidIncidentReportError",
    "InvalidIncidentStatusError",
    "InvalidMeetingSettingsError",
    "InvalidProposalStatusError",
    "InvalidQueueItemTypeError",
    "InvalidReorderPositionError",
    "InvalidVoteTypeError",
    "MeetingInactiveError",
    # Conflict
    "ConflictError",
    "AlreadyInQueueError",
    "AlreadyParticipantError",
    "DirectResponseLimitExceededError",
    "InvalidQueueTransitionError",
    "PinAllocationError",
    "ProposalNotActiveError",
    # Permission
    "PermissionDeniedError",
    "FacilitatorRequiredError",
    "NotItemOwnerError",
    "NotParticipantError",
    "NotProposerError",
    # Not found
    "NotFoundError",
    "IncidentNotFoundError",
    "MeetingNotFoundError",
    "ParticipantNotFoundError",
    "ProposalNotFoundError",
    "QueueItemNotFoundError",
]
