"""In-memory stub for ProposalRepositoryProtocol.

Simulates the unique (proposal_id, user_id) constraint on votes: an
upsert replaces the earlier vote in place, keeping its first-cast
position and original created_at.
"""

from __future__ import annotations

from dataclasses import replace
from uuid import UUID

from src.domain.models.proposal import Proposal, Vote


class ProposalRepositoryStub:
    """In-memory stub implementation of ProposalRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize empty stub."""
        self._proposals: dict[UUID, Proposal] = {}
        # Key: (proposal_id, user_id)
        self._votes: dict[tuple[UUID, UUID], Vote] = {}

    async def save(self, proposal: Proposal) -> None:
        if proposal.id in self._proposals:
            raise ValueError(f"Proposal {proposal.id} already exists")
        self._proposals[proposal.id] = proposal

    async def get(self, proposal_id: UUID) -> Proposal | None:
        return self._proposals.get(proposal_id)

    async def update(self, proposal: Proposal) -> None:
        if proposal.id not in self._proposals:
            raise KeyError(proposal.id)
        self._proposals[proposal.id] = proposal

    async def list_by_meeting(self, meeting_id: UUID) -> list[Proposal]:
        proposals = [p for p in self._proposals.values() if p.meeting_id == meeting_id]
        return sorted(proposals, key=lambda p: p.created_at, reverse=True)

    async def upsert_vote(self, vote: Vote) -> Vote:
        key = (vote.proposal_id, vote.user_id)
        existing = self._votes.get(key)
        if existing is not None:
            vote = replace(vote, created_at=existing.created_at)
        self._votes[key] = vote
        return vote

    async def list_votes(self, proposal_id: UUID) -> list[Vote]:
        return [
            vote
            for (vote_proposal_id, _), vote in self._votes.items()
            if vote_proposal_id == proposal_id
        ]

    def clear(self) -> None:
        """Clear all stored data (for testing)."""
        self._proposals.clear()
        self._votes.clear()
