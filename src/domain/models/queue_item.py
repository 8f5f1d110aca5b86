"""Queue item domain model.

A QueueItem is one speaking request on a meeting's stack. Items are
immutable; every lifecycle transition returns a new instance that the
caller writes back through the queue item repository.

Lifecycle:
    WAITING -> SPEAKING (facilitator starts the speaker)
    WAITING -> SKIPPED  (owner or facilitator removes the request)
    SPEAKING -> DONE    (speaker ends, or another speaker is started)

DONE and SKIPPED are terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID


class QueueItemType(Enum):
    """Kind of speaking request.

    Types:
        HAND: Regular request to speak
        DIRECT_RESPONSE: Brief interjection answering the current speaker
        POINT_PROCESS: Meta-discussion about how the meeting is run
        POINT_INFO: Sharing a piece of information
        POINT_CLARIFICATION: Asking for something to be clarified
    """

    HAND = "HAND"
    DIRECT_RESPONSE = "DIRECT_RESPONSE"
    POINT_PROCESS = "POINT_PROCESS"
    POINT_INFO = "POINT_INFO"
    POINT_CLARIFICATION = "POINT_CLARIFICATION"


class QueueItemStatus(Enum):
    """State of a speaking request."""

    WAITING = "WAITING"
    SPEAKING = "SPEAKING"
    DONE = "DONE"
    SKIPPED = "SKIPPED"

    def is_terminal(self) -> bool:
        """Return True for DONE and SKIPPED."""
        return self in TERMINAL_QUEUE_STATUSES


TERMINAL_QUEUE_STATUSES: frozenset[QueueItemStatus] = frozenset(
    {QueueItemStatus.DONE, QueueItemStatus.SKIPPED}
)


class AuditEntryKind(Enum):
    """Kind of annotation recorded on a queue item's audit trail."""

    REMOVAL = "REMOVAL"
    REORDER = "REORDER"


@dataclass(frozen=True, eq=True)
class AuditEntry:
    """One append-only annotation on a queue item.

    Attributes:
        kind: Whether this records a removal or a requested reorder.
        actor_id: User who performed the action.
        recorded_at: When the annotation was written.
        reason: Free-text reason given by the actor, if any.
        requested_position: Desired 1-based position (REORDER only).
    """

    kind: AuditEntryKind
    actor_id: UUID
    recorded_at: datetime
    reason: str | None = None
    requested_position: int | None = None


@dataclass(frozen=True, eq=True)
class QueueItem:
    """A speaking request on a meeting's stack.

    Attributes:
        id: Unique identifier.
        meeting_id: Meeting the request belongs to.
        user_id: User who raised the request.
        type: Kind of request. None only for malformed stored records,
            which the ordering engine treats like a HAND.
        status: Current lifecycle status.
        created_at: Creation time, assigned once and never changed.
        started_at: When the item became SPEAKING.
        completed_at: When the item became DONE.
        tags: Self-identified tags matched against meeting invite tags.
        audit_trail: Append-only removal/reorder annotations.
    """

    id: UUID
    meeting_id: UUID
    user_id: UUID
    type: QueueItemType | None
    status: QueueItemStatus
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    tags: frozenset[str] = field(default_factory=frozenset)
    audit_trail: tuple[AuditEntry, ...] = field(default_factory=tuple)

    def start(self, now: datetime) -> QueueItem:
        """Return a copy transitioned WAITING -> SPEAKING."""
        return replace(self, status=QueueItemStatus.SPEAKING, started_at=now)

    def complete(self, now: datetime) -> QueueItem:
        """Return a copy transitioned SPEAKING -> DONE."""
        return replace(self, status=QueueItemStatus.DONE, completed_at=now)

    def skip(self, entry: AuditEntry) -> QueueItem:
        """Return a copy transitioned WAITING -> SKIPPED with a removal entry."""
        return replace(
            self,
            status=QueueItemStatus.SKIPPED,
            audit_trail=self.audit_trail + (entry,),
        )

    def annotate(self, entry: AuditEntry) -> QueueItem:
        """Return a copy with ``entry`` appended to the audit trail."""
        return replace(self, audit_trail=self.audit_trail + (entry,))
