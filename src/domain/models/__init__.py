"""Domain models for Stack Keeper.

Contains the immutable records the facilitation core works on. These
models contain no infrastructure dependencies.
"""

from src.domain.models.incident import (
    IncidentReport,
    IncidentStats,
    IncidentStatus,
    IncidentStatusChange,
    IncidentType,
)
from src.domain.models.meeting import (
    Meeting,
    MeetingSettings,
    Participant,
    ParticipantRole,
)
from src.domain.models.ordered_queue import OrderedQueueEntry, VoteTally
from src.domain.models.proposal import Proposal, ProposalStatus, Vote, VoteType
from src.domain.models.queue_item import (
    TERMINAL_QUEUE_STATUSES,
    AuditEntry,
    AuditEntryKind,
    QueueItem,
    QueueItemStatus,
    QueueItemType,
)

__all__: list[str] = [
    "AuditEntry",
    "AuditEntryKind",
    "IncidentReport",
    "IncidentStats",
    "IncidentStatus",
    "IncidentStatusChange",
    "IncidentType",
    "Meeting",
    "MeetingSettings",
    "OrderedQueueEntry",
    "Participant",
    "ParticipantRole",
    "Proposal",
    "ProposalStatus",
    "QueueItem",
    "QueueItemStatus",
    "QueueItemType",
    "TERMINAL_QUEUE_STATUSES",
    "Vote",
    "VoteTally",
    "VoteType",
]
