"""Unit tests for ConsensusService.

Covers automatic resolution (block, pass, stay active), vote upserts,
withdrawal, the facilitator override and tallies.
"""

import asyncio
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from src.application.services.consensus_service import ConsensusService
from src.domain.errors import (
    FacilitatorRequiredError,
    InvalidProposalStatusError,
    InvalidVoteTypeError,
    MeetingInactiveError,
    NotParticipantError,
    NotProposerError,
    ProposalNotActiveError,
    ProposalNotFoundError,
)
from src.domain.models.meeting import ParticipantRole
from src.domain.models.proposal import ProposalStatus, VoteType
from src.infrastructure.stubs.meeting_repository_stub import MeetingRepositoryStub
from tests.helpers.factories import at, make_meeting, make_participant
from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.yielding_repositories import YieldingProposalRepository


async def meeting_with_participants(meeting_repo: MeetingRepositoryStub, count: int):
    """Store a meeting with ``count`` active participants; the first facilitates."""
    meeting = make_meeting()
    await meeting_repo.save(meeting)
    user_ids = [uuid4() for _ in range(count)]
    for index, user_id in enumerate(user_ids):
        role = ParticipantRole.FACILITATOR if index == 0 else ParticipantRole.PARTICIPANT
        await meeting_repo.save_participant(make_participant(meeting.id, user_id, role))
    return meeting, user_ids


class TestCastVote:
    """Tests for cast_vote and automatic resolution."""

    @pytest.mark.asyncio
    async def test_block_decides_immediately(
        self,
        consensus: ConsensusService,
        meeting_repo,
        fake_time: FakeTimeAuthority,
    ) -> None:
        meeting, (a, b, c) = await meeting_with_participants(meeting_repo, 3)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")

        first = await consensus.cast_vote(proposal.id, a, VoteType.AGREE)
        second = await consensus.cast_vote(proposal.id, b, VoteType.AGREE)
        fake_time.advance(seconds=30)
        blocked = await consensus.cast_vote(proposal.id, c, VoteType.BLOCK)

        assert first.proposal.status == ProposalStatus.ACTIVE
        assert second.proposal.status == ProposalStatus.ACTIVE
        assert blocked.proposal.status == ProposalStatus.BLOCKED
        assert blocked.proposal.decided_at == at(30)
        assert blocked.decision.blocked_by == frozenset({c})

    @pytest.mark.asyncio
    async def test_block_with_partial_participation(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, users = await meeting_with_participants(meeting_repo, 5)
        proposal = await consensus.create_proposal(meeting.id, users[0], "Move venue")

        outcome = await consensus.cast_vote(proposal.id, users[1], "BLOCK")

        assert outcome.proposal.status == ProposalStatus.BLOCKED

    @pytest.mark.asyncio
    async def test_passes_on_full_participation(
        self, consensus: ConsensusService, meeting_repo, proposal_repo
    ) -> None:
        meeting, (a, b, c, d) = await meeting_with_participants(meeting_repo, 4)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")

        await consensus.cast_vote(proposal.id, a, VoteType.AGREE)
        await consensus.cast_vote(proposal.id, b, VoteType.AGREE)
        third = await consensus.cast_vote(proposal.id, c, VoteType.STAND_ASIDE)
        last = await consensus.cast_vote(proposal.id, d, VoteType.CONCERN)

        assert third.proposal.status == ProposalStatus.ACTIVE
        assert last.proposal.status == ProposalStatus.PASSED
        assert last.proposal.decided_at is not None
        assert (await proposal_repo.get(proposal.id)).status == ProposalStatus.PASSED

    @pytest.mark.asyncio
    async def test_partial_participation_stays_active(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, (a, b, _, _) = await meeting_with_participants(meeting_repo, 4)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")

        await consensus.cast_vote(proposal.id, a, VoteType.AGREE)
        outcome = await consensus.cast_vote(proposal.id, b, VoteType.AGREE)

        assert outcome.proposal.status == ProposalStatus.ACTIVE
        assert outcome.proposal.decided_at is None

    @pytest.mark.asyncio
    async def test_revote_overwrites(
        self,
        consensus: ConsensusService,
        meeting_repo,
        proposal_repo,
        fake_time: FakeTimeAuthority,
    ) -> None:
        meeting, (a, b, c) = await meeting_with_participants(meeting_repo, 3)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")

        await consensus.cast_vote(proposal.id, b, VoteType.CONCERN)
        fake_time.advance(seconds=10)
        outcome = await consensus.cast_vote(proposal.id, b, VoteType.AGREE, rationale="convinced")

        votes = await proposal_repo.list_votes(proposal.id)
        assert len(votes) == 1
        assert votes[0].vote_type == VoteType.AGREE
        assert votes[0].rationale == "convinced"
        assert outcome.vote.created_at == at(0)
        assert outcome.vote.updated_at == at(10)

    @pytest.mark.asyncio
    async def test_vote_count_never_exceeds_participants(
        self, consensus: ConsensusService, meeting_repo, proposal_repo
    ) -> None:
        meeting, users = await meeting_with_participants(meeting_repo, 3)
        proposal = await consensus.create_proposal(meeting.id, users[0], "Adopt agenda")

        for _ in range(3):
            for user in users[:2]:
                await consensus.cast_vote(proposal.id, user, VoteType.CONCERN)

        assert len(await proposal_repo.list_votes(proposal.id)) == 2

    @pytest.mark.asyncio
    async def test_decided_proposal_rejects_votes(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, (a, b, c) = await meeting_with_participants(meeting_repo, 3)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")
        await consensus.cast_vote(proposal.id, b, VoteType.BLOCK)

        with pytest.raises(ProposalNotActiveError) as exc_info:
            await consensus.cast_vote(proposal.id, c, VoteType.AGREE)

        assert exc_info.value.status == ProposalStatus.BLOCKED

    @pytest.mark.asyncio
    async def test_non_participant_cannot_vote(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, (a, _) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")

        with pytest.raises(NotParticipantError):
            await consensus.cast_vote(proposal.id, uuid4(), VoteType.AGREE)

    @pytest.mark.asyncio
    async def test_departed_participant_cannot_vote(
        self, consensus: ConsensusService, meeting_repo, proposal_repo
    ) -> None:
        meeting, (a, b) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")
        participant = await meeting_repo.get_participant(meeting.id, b)
        await meeting_repo.update_participant(participant.leave(at(1)))

        with pytest.raises(NotParticipantError):
            await consensus.cast_vote(proposal.id, b, VoteType.AGREE)

        assert await proposal_repo.list_votes(proposal.id) == []

    @pytest.mark.asyncio
    async def test_quorum_shrinks_when_a_participant_leaves(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, (a, b, c) = await meeting_with_participants(meeting_repo, 3)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")
        participant = await meeting_repo.get_participant(meeting.id, c)
        await meeting_repo.update_participant(participant.leave(at(1)))

        await consensus.cast_vote(proposal.id, a, VoteType.AGREE)
        outcome = await consensus.cast_vote(proposal.id, b, VoteType.AGREE)

        assert outcome.proposal.status == ProposalStatus.PASSED

    @pytest.mark.asyncio
    async def test_invalid_vote_type(self, consensus: ConsensusService, meeting_repo) -> None:
        meeting, (a, _) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")

        with pytest.raises(InvalidVoteTypeError):
            await consensus.cast_vote(proposal.id, a, "MAYBE")

    @pytest.mark.asyncio
    async def test_unknown_proposal(self, consensus: ConsensusService) -> None:
        with pytest.raises(ProposalNotFoundError):
            await consensus.cast_vote(uuid4(), uuid4(), VoteType.AGREE)

    @pytest.mark.asyncio
    async def test_records_vote_and_decision_metrics(
        self, proposal_repo, meeting_repo, fake_time
    ) -> None:
        metrics = MagicMock()
        service = ConsensusService(proposal_repo, meeting_repo, fake_time, metrics=metrics)
        meeting, (a, b) = await meeting_with_participants(meeting_repo, 2)
        proposal = await service.create_proposal(meeting.id, a, "Adopt agenda")

        await service.cast_vote(proposal.id, b, VoteType.BLOCK)

        metrics.record_vote.assert_called_once_with(VoteType.BLOCK)
        metrics.record_proposal_decision.assert_called_once_with(
            ProposalStatus.BLOCKED, "automatic"
        )


class TestCreateProposal:
    @pytest.mark.asyncio
    async def test_non_participant_cannot_propose(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, _ = await meeting_with_participants(meeting_repo, 2)

        with pytest.raises(NotParticipantError):
            await consensus.create_proposal(meeting.id, uuid4(), "Adopt agenda")

    @pytest.mark.asyncio
    async def test_ended_meeting(self, consensus: ConsensusService, meeting_repo) -> None:
        meeting, (a, _) = await meeting_with_participants(meeting_repo, 2)
        await meeting_repo.update(meeting.end(at(5)))

        with pytest.raises(MeetingInactiveError):
            await consensus.create_proposal(meeting.id, a, "Adopt agenda")

    @pytest.mark.asyncio
    async def test_list_newest_first(
        self, consensus: ConsensusService, meeting_repo, fake_time: FakeTimeAuthority
    ) -> None:
        meeting, (a, _) = await meeting_with_participants(meeting_repo, 2)
        older = await consensus.create_proposal(meeting.id, a, "First")
        fake_time.advance(seconds=1)
        newer = await consensus.create_proposal(meeting.id, a, "Second", "details")

        assert await consensus.list_proposals(meeting.id) == [newer, older]
        assert (await consensus.get_proposal(newer.id)).description == "details"


class TestWithdraw:
    @pytest.mark.asyncio
    async def test_proposer_withdraws(
        self, consensus: ConsensusService, meeting_repo, fake_time: FakeTimeAuthority
    ) -> None:
        meeting, (a, _) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")
        fake_time.advance(seconds=45)

        withdrawn = await consensus.withdraw(proposal.id, a)

        assert withdrawn.status == ProposalStatus.WITHDRAWN
        assert withdrawn.decided_at == at(45)

    @pytest.mark.asyncio
    async def test_only_proposer(self, consensus: ConsensusService, meeting_repo) -> None:
        meeting, (a, b) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")

        with pytest.raises(NotProposerError):
            await consensus.withdraw(proposal.id, b)

    @pytest.mark.asyncio
    async def test_decided_proposal_cannot_be_withdrawn(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, (a, b) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")
        await consensus.cast_vote(proposal.id, b, VoteType.BLOCK)

        with pytest.raises(ProposalNotActiveError):
            await consensus.withdraw(proposal.id, a)


class TestSetStatus:
    """Tests for the facilitator override."""

    @pytest.mark.asyncio
    async def test_facilitator_reopens_blocked_proposal(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, (facilitator, b) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, b, "Adopt agenda")
        await consensus.cast_vote(proposal.id, b, VoteType.BLOCK)

        reopened = await consensus.set_status(proposal.id, facilitator, "ACTIVE")

        assert reopened.status == ProposalStatus.ACTIVE
        assert reopened.decided_at is None

    @pytest.mark.asyncio
    async def test_facilitator_forces_pass(
        self, consensus: ConsensusService, meeting_repo, fake_time: FakeTimeAuthority
    ) -> None:
        meeting, (facilitator, b) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, b, "Adopt agenda")
        fake_time.advance(seconds=20)

        passed = await consensus.set_status(proposal.id, facilitator, ProposalStatus.PASSED)

        assert passed.decided_at == at(20)

    @pytest.mark.asyncio
    async def test_requires_facilitator(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, (_, b) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, b, "Adopt agenda")

        with pytest.raises(FacilitatorRequiredError):
            await consensus.set_status(proposal.id, b, ProposalStatus.PASSED)

    @pytest.mark.asyncio
    async def test_invalid_status(self, consensus: ConsensusService, meeting_repo) -> None:
        meeting, (facilitator, _) = await meeting_with_participants(meeting_repo, 2)
        proposal = await consensus.create_proposal(meeting.id, facilitator, "Adopt agenda")

        with pytest.raises(InvalidProposalStatusError):
            await consensus.set_status(proposal.id, facilitator, "TABLED")


class TestGetTally:
    @pytest.mark.asyncio
    async def test_counts_and_outstanding(
        self, consensus: ConsensusService, meeting_repo
    ) -> None:
        meeting, (a, b, c, d) = await meeting_with_participants(meeting_repo, 4)
        proposal = await consensus.create_proposal(meeting.id, a, "Adopt agenda")
        await consensus.cast_vote(proposal.id, a, VoteType.AGREE)
        await consensus.cast_vote(proposal.id, b, VoteType.CONCERN)

        tally = await consensus.get_tally(proposal.id)

        assert tally.counts == {
            VoteType.AGREE: 1,
            VoteType.STAND_ASIDE: 0,
            VoteType.CONCERN: 1,
            VoteType.BLOCK: 0,
        }
        assert tally.total_votes == 2
        assert tally.voter_ids == frozenset({a, b})
        assert tally.outstanding_ids == frozenset({c, d})
        assert tally.active_participant_count == 4
        assert tally.status == ProposalStatus.ACTIVE


class TestVoteSerialization:
    """Concurrent votes against a store that suspends while listing votes."""

    @pytest.fixture
    def proposal_repo(self) -> YieldingProposalRepository:
        return YieldingProposalRepository()

    @pytest.mark.asyncio
    async def test_concurrent_votes_all_land_and_decide_once(
        self, consensus: ConsensusService, meeting_repo, proposal_repo
    ) -> None:
        meeting, users = await meeting_with_participants(meeting_repo, 4)
        proposal = await consensus.create_proposal(meeting.id, users[0], "Adopt agenda")

        outcomes = await asyncio.gather(
            *(consensus.cast_vote(proposal.id, user, VoteType.AGREE) for user in users)
        )

        assert len(await proposal_repo.list_votes(proposal.id)) == 4
        assert [o.decision.is_decided for o in outcomes] == [False, False, False, True]
        assert (await proposal_repo.get(proposal.id)).status == ProposalStatus.PASSED
