"""Consensus decision rules.

Pure evaluation of whether a proposal resolves automatically after a
vote. Deterministic: the same votes and participants always produce the
same decision.

Rules, in order:
    1. Any BLOCK vote blocks the proposal immediately, however many
       participants have voted.
    2. Otherwise, once every active participant has voted, the proposal
       passes if AGREE + STAND_ASIDE >= ceil(threshold * active participants).
    3. Otherwise the proposal stays ACTIVE.

Manual status overrides are not part of these rules.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Set
from dataclasses import dataclass
from uuid import UUID

from src.domain.models.proposal import ProposalStatus, Vote, VoteType

DEFAULT_PASS_THRESHOLD = 0.5

SUPPORTING_VOTE_TYPES: frozenset[VoteType] = frozenset(
    {VoteType.AGREE, VoteType.STAND_ASIDE}
)


@dataclass(frozen=True, eq=True)
class ConsensusDecision:
    """Outcome of evaluating the votes on a proposal.

    Attributes:
        status: ACTIVE when undecided, otherwise PASSED or BLOCKED.
        votes_cast: Votes counted toward participation.
        active_participants: Active participant count.
        supporting: AGREE + STAND_ASIDE among counted votes.
        required_support: Support needed to pass.
        blocked_by: Users whose BLOCK decided the proposal.
    """

    status: ProposalStatus
    votes_cast: int
    active_participants: int
    supporting: int
    required_support: int
    blocked_by: frozenset[UUID] = frozenset()

    @property
    def is_decided(self) -> bool:
        return self.status != ProposalStatus.ACTIVE


def required_support(active_participants: int, threshold: float = DEFAULT_PASS_THRESHOLD) -> int:
    """Return ceil(threshold * active_participants)."""
    return math.ceil(active_participants * threshold)


def evaluate_votes(
    votes: Iterable[Vote],
    active_participant_ids: Set[UUID],
    threshold: float = DEFAULT_PASS_THRESHOLD,
) -> ConsensusDecision:
    """Evaluate votes against the active participants of the meeting.

    A BLOCK from any recorded vote is decisive. Participation and support
    are counted over votes from currently active participants, so a
    participant who left after voting cannot hold a proposal open.

    Args:
        votes: Every vote recorded on the proposal.
        active_participant_ids: Users who have not left the meeting.
        threshold: Fraction of active participants whose support is needed.

    Returns:
        ConsensusDecision describing the resulting status.
    """
    votes = list(votes)
    total = len(active_participant_ids)
    needed = required_support(total, threshold)

    counted = [vote for vote in votes if vote.user_id in active_participant_ids]
    supporting = sum(1 for vote in counted if vote.vote_type in SUPPORTING_VOTE_TYPES)

    blockers = frozenset(vote.user_id for vote in votes if vote.vote_type == VoteType.BLOCK)
    if blockers:
        status = ProposalStatus.BLOCKED
    elif total > 0 and len(counted) == total and supporting >= needed:
        status = ProposalStatus.PASSED
    else:
        status = ProposalStatus.ACTIVE

    return ConsensusDecision(
        status=status,
        votes_cast=len(counted),
        active_participants=total,
        supporting=supporting,
        required_support=needed,
        blocked_by=blockers,
    )
