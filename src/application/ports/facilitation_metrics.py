"""Facilitation metrics port.

Services record queue, consensus and incident activity through this protocol so
the metrics backend can be swapped or omitted in tests.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.models.incident import IncidentType
from src.domain.models.proposal import ProposalStatus, VoteType
from src.domain.models.queue_item import QueueItemType


class FacilitationMetricsProtocol(Protocol):
    """Protocol for recording facilitation metrics."""

    def record_queue_join(self, item_type: QueueItemType) -> None:
        """Record a speaking request joining the stack."""
        ...

    def record_speaker_turn(self) -> None:
        """Record a speaker being started."""
        ...

    def record_vote(self, vote_type: VoteType) -> None:
        """Record a vote being cast or changed."""
        ...

    def record_proposal_decision(self, status: ProposalStatus, resolution: str) -> None:
        """Record a proposal changing status.

        Args:
            status: New status.
            resolution: "automatic", "withdrawn" or "override".
        """
        ...

    def record_incident_report(self, incident_type: IncidentType, urgent: bool) -> None:
        """Record a safety incident being reported."""
        ...
