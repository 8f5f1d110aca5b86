"""Proposal and vote domain models for consensus decisions.

State Machine:
    ACTIVE -> PASSED     (full participation, enough agreement)
    ACTIVE -> BLOCKED    (any single BLOCK vote)
    ACTIVE -> WITHDRAWN  (proposer withdraws)

PASSED, BLOCKED and WITHDRAWN are terminal under the automatic rules.
A facilitator override may force any status, including reopening to
ACTIVE; that path lives in ConsensusService.set_status and is never
taken by vote evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from uuid import UUID


class ProposalStatus(Enum):
    """Status of a proposal."""

    ACTIVE = "ACTIVE"
    PASSED = "PASSED"
    BLOCKED = "BLOCKED"
    WITHDRAWN = "WITHDRAWN"

    def is_decided(self) -> bool:
        return self != ProposalStatus.ACTIVE


class VoteType(Enum):
    """Consensus vote types.

    Types:
        AGREE: Support for the proposal
        STAND_ASIDE: Non-blocking abstention, counted toward passing
        CONCERN: Non-blocking objection
        BLOCK: Unilateral veto
    """

    AGREE = "AGREE"
    STAND_ASIDE = "STAND_ASIDE"
    CONCERN = "CONCERN"
    BLOCK = "BLOCK"


@dataclass(frozen=True, eq=True)
class Proposal:
    """A proposal put to the meeting for a consensus decision.

    Attributes:
        id: Unique identifier.
        meeting_id: Meeting the proposal belongs to.
        proposer_id: User who made the proposal.
        title: Short title.
        status: Current status.
        created_at: Creation time.
        description: Optional longer text.
        decided_at: Set when the status leaves ACTIVE, None while ACTIVE.
    """

    id: UUID
    meeting_id: UUID
    proposer_id: UUID
    title: str
    status: ProposalStatus
    created_at: datetime
    description: str | None = None
    decided_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == ProposalStatus.ACTIVE

    def decide(self, status: ProposalStatus, now: datetime) -> Proposal:
        """Return a copy moved to ``status``.

        ``decided_at`` is stamped for any decided status and cleared when
        the target is ACTIVE.
        """
        return replace(
            self,
            status=status,
            decided_at=now if status.is_decided() else None,
        )


@dataclass(frozen=True, eq=True)
class Vote:
    """One participant's vote on a proposal, unique per (proposal, user).

    Attributes:
        proposal_id: Proposal voted on.
        user_id: Voter.
        vote_type: The vote.
        created_at: When the user first voted.
        updated_at: When the vote was last written.
        rationale: Optional explanation.
    """

    proposal_id: UUID
    user_id: UUID
    vote_type: VoteType
    created_at: datetime
    updated_at: datetime
    rationale: str | None = None
