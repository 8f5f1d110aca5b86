"""Proposal and vote repository port.

Votes are keyed by (proposal_id, user_id); upsert_vote replaces any
earlier vote by the same user so a proposal never holds two votes from
one participant.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.proposal import Proposal, Vote


class ProposalRepositoryProtocol(Protocol):
    """Protocol for proposal and vote persistence."""

    async def save(self, proposal: Proposal) -> None:
        """Store a new proposal.

        Raises:
            ValueError: If the id already exists.
        """
        ...

    async def get(self, proposal_id: UUID) -> Proposal | None:
        ...

    async def update(self, proposal: Proposal) -> None:
        """Replace the stored proposal with the same id.

        Raises:
            KeyError: If the proposal does not exist.
        """
        ...

    async def list_by_meeting(self, meeting_id: UUID) -> list[Proposal]:
        """Return proposals of a meeting, newest first."""
        ...

    async def upsert_vote(self, vote: Vote) -> Vote:
        """Insert or replace the vote for (vote.proposal_id, vote.user_id).

        On replacement the original created_at is kept.

        Returns:
            The stored vote.
        """
        ...

    async def list_votes(self, proposal_id: UUID) -> list[Vote]:
        """Return every vote on the proposal, in first-cast order."""
        ...
