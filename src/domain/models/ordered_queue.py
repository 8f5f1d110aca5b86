"""Read models for the ordered speaking stack and proposal tallies."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from src.domain.models.proposal import ProposalStatus, VoteType
from src.domain.models.queue_item import QueueItem


@dataclass(frozen=True, eq=True)
class OrderedQueueEntry:
    """A waiting item with its computed position and the reason for it.

    Attributes:
        item: The waiting queue item.
        position: 1-based position on the stack.
        reason: Human-readable justification for the position.
    """

    item: QueueItem
    position: int
    reason: str


@dataclass(frozen=True, eq=True)
class VoteTally:
    """Summary of voting on one proposal.

    Attributes:
        proposal_id: Proposal summarized.
        status: Proposal status at the time of the tally.
        counts: Votes per type, every type present (zero when unused).
        voter_ids: Users who have voted.
        outstanding_ids: Active participants who have not voted yet.
        active_participant_count: Number of active participants.
    """

    proposal_id: UUID
    status: ProposalStatus
    counts: dict[VoteType, int] = field(default_factory=dict)
    voter_ids: frozenset[UUID] = field(default_factory=frozenset)
    outstanding_ids: frozenset[UUID] = field(default_factory=frozenset)
    active_participant_count: int = 0

    @property
    def total_votes(self) -> int:
        return sum(self.counts.values())
