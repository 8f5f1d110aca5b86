"""Safety incident reports raised during a meeting.

An incident is visible only to the meeting's facilitators. An anonymous
report never stores its reporter. Every status change a facilitator
makes is appended to ``status_history``; entries are never rewritten.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID


class IncidentType(Enum):
    """Kind of concern being reported."""

    HARASSMENT = "harassment"
    DISRUPTION = "disruption"
    VIOLATION = "violation"
    TECHNICAL = "technical"
    PRIVACY = "privacy"
    OTHER = "other"


class IncidentStatus(Enum):
    OPEN = "OPEN"
    INVESTIGATING = "INVESTIGATING"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


@dataclass(frozen=True, eq=True)
class IncidentStatusChange:
    """One facilitator status update on an incident."""

    status: IncidentStatus
    facilitator_id: UUID
    recorded_at: datetime
    notes: str | None = None


@dataclass(frozen=True, eq=True)
class IncidentReport:
    """A safety concern reported in a meeting.

    Attributes:
        id: Unique identifier.
        meeting_id: Meeting the incident happened in.
        reporter_id: Reporting user. None for anonymous reports.
        type: Kind of concern.
        description: Reporter's account.
        urgent: Whether the reporter flagged it as urgent. Urgent reports
            start in INVESTIGATING rather than OPEN.
        anonymous: Whether the reporter asked to stay anonymous.
        status: Current status.
        created_at: Report time.
        status_history: Facilitator updates, oldest first.
    """

    id: UUID
    meeting_id: UUID
    reporter_id: UUID | None
    type: IncidentType
    description: str
    urgent: bool
    anonymous: bool
    status: IncidentStatus
    created_at: datetime
    status_history: tuple[IncidentStatusChange, ...] = field(default_factory=tuple)

    @property
    def summary(self) -> str:
        return f"[{self.type.value.upper()}] {self.description}"

    def with_status(self, change: IncidentStatusChange) -> IncidentReport:
        """Return a copy moved to ``change.status`` with the change recorded."""
        return replace(
            self,
            status=change.status,
            status_history=self.status_history + (change,),
        )


@dataclass(frozen=True, eq=True)
class IncidentStats:
    """Incident counts for one meeting.

    Attributes:
        total: Every incident reported in the meeting.
        urgent: Incidents flagged urgent, whatever their status.
        by_status: Count per status. Statuses with no incidents are absent.
    """

    total: int
    urgent: int
    by_status: Mapping[IncidentStatus, int]
