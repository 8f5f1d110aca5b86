"""Consensus service: proposals, votes and their resolution.

Owns proposal and vote state. Each vote is upserted and then the
proposal is evaluated against a snapshot of its votes and the meeting's
active participants, all under the per-proposal lock, so concurrent votes
cannot lose updates or evaluate a stale snapshot.

Automatic resolution only ever moves an ACTIVE proposal to PASSED or
BLOCKED. The facilitator override in ``set_status`` is the single path
that can reopen or otherwise force a status.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

import structlog

from src.application.ports.facilitation_metrics import FacilitationMetricsProtocol
from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.application.ports.proposal_repository import ProposalRepositoryProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.services.keyed_lock import KeyedLock
from src.config.facilitation_config import (
    DEFAULT_FACILITATION_CONFIG,
    FacilitationConfig,
)
from src.domain.errors import (
    FacilitatorRequiredError,
    InvalidProposalStatusError,
    InvalidVoteTypeError,
    MeetingInactiveError,
    MeetingNotFoundError,
    NotParticipantError,
    NotProposerError,
    ProposalNotActiveError,
    ProposalNotFoundError,
)
from src.domain.models.ordered_queue import VoteTally
from src.domain.models.proposal import Proposal, ProposalStatus, Vote, VoteType
from src.domain.services.consensus_rules import ConsensusDecision, evaluate_votes

logger = structlog.get_logger(__name__)


def parse_vote_type(value: VoteType | str) -> VoteType:
    """Coerce a vote type name.

    Raises:
        InvalidVoteTypeError: If ``value`` names no VoteType.
    """
    if isinstance(value, VoteType):
        return value
    try:
        return VoteType(value)
    except ValueError:
        raise InvalidVoteTypeError(value) from None


def parse_proposal_status(value: ProposalStatus | str) -> ProposalStatus:
    """Coerce a proposal status name.

    Raises:
        InvalidProposalStatusError: If ``value`` names no ProposalStatus.
    """
    if isinstance(value, ProposalStatus):
        return value
    try:
        return ProposalStatus(value)
    except ValueError:
        raise InvalidProposalStatusError(value) from None


@dataclass(frozen=True, eq=True)
class VoteOutcome:
    """Result of casting a vote.

    Attributes:
        vote: The stored vote.
        proposal: The proposal after evaluation.
        decision: The evaluation that produced ``proposal.status``.
    """

    vote: Vote
    proposal: Proposal
    decision: ConsensusDecision


class ConsensusService:
    """Manages proposals and resolves them from votes.

    Example:
        >>> service = ConsensusService(
        ...     proposal_repository=proposal_repo,
        ...     meeting_repository=meeting_repo,
        ...     time_authority=time_authority,
        ... )
        >>> proposal = await service.create_proposal(meeting_id, alice, "Adopt agenda")
        >>> outcome = await service.cast_vote(proposal.id, bob, "AGREE")
        >>> outcome.proposal.status
        <ProposalStatus.ACTIVE: 'ACTIVE'>
    """

    def __init__(
        self,
        proposal_repository: ProposalRepositoryProtocol,
        meeting_repository: MeetingRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        config: FacilitationConfig = DEFAULT_FACILITATION_CONFIG,
        locks: KeyedLock | None = None,
        metrics: FacilitationMetricsProtocol | None = None,
    ) -> None:
        """Initialize the consensus service.

        Args:
            proposal_repository: Store of proposals and votes.
            meeting_repository: Source of meetings and participants.
            time_authority: Clock for every timestamp written.
            config: Supplies the pass threshold.
            locks: Per-proposal locks.
            metrics: Optional metrics recorder. Skipped when None.
        """
        self._proposal_repository = proposal_repository
        self._meeting_repository = meeting_repository
        self._time = time_authority
        self._threshold = config.pass_threshold
        self._locks = locks or KeyedLock()
        self._metrics = metrics

    async def create_proposal(
        self,
        meeting_id: UUID,
        proposer_id: UUID,
        title: str,
        description: str | None = None,
    ) -> Proposal:
        """Put a new ACTIVE proposal to the meeting.

        Raises:
            MeetingNotFoundError: Meeting does not exist.
            MeetingInactiveError: Meeting has ended.
            NotParticipantError: Proposer is not an active participant.
        """
        log = logger.bind(meeting_id=str(meeting_id), proposer_id=str(proposer_id))

        meeting = await self._meeting_repository.get(meeting_id)
        if meeting is None:
            log.warning("meeting_not_found")
            raise MeetingNotFoundError(meeting_id)
        if not meeting.is_active:
            log.warning("meeting_inactive")
            raise MeetingInactiveError(meeting_id)
        await self._require_active_participant(meeting_id, proposer_id, log)

        proposal = Proposal(
            id=uuid4(),
            meeting_id=meeting_id,
            proposer_id=proposer_id,
            title=title,
            description=description,
            status=ProposalStatus.ACTIVE,
            created_at=self._time.now(),
        )
        await self._proposal_repository.save(proposal)
        log.info("proposal_created", proposal_id=str(proposal.id))
        return proposal

    async def cast_vote(
        self,
        proposal_id: UUID,
        user_id: UUID,
        vote_type: VoteType | str,
        rationale: str | None = None,
    ) -> VoteOutcome:
        """Record a vote and resolve the proposal if it is now decided.

        A repeat vote by the same user replaces the earlier one.

        Args:
            proposal_id: Proposal voted on.
            user_id: Voter. Must be an active participant of the meeting.
            vote_type: A VoteType or its name.
            rationale: Optional explanation.

        Returns:
            VoteOutcome with the stored vote and resulting proposal.

        Raises:
            InvalidVoteTypeError: Unknown vote type.
            ProposalNotFoundError: Proposal does not exist.
            ProposalNotActiveError: Proposal already decided.
            NotParticipantError: Voter is not an active participant.
        """
        log = logger.bind(proposal_id=str(proposal_id), user_id=str(user_id))

        try:
            resolved_type = parse_vote_type(vote_type)
        except InvalidVoteTypeError:
            log.warning("vote_rejected", reason="invalid_vote_type", vote_type=vote_type)
            raise

        async with self._locks.hold(proposal_id):
            proposal = await self._load_proposal(proposal_id, log)
            self._require_active_proposal(proposal, log)
            await self._require_active_participant(proposal.meeting_id, user_id, log)

            now = self._time.now()
            stored = await self._proposal_repository.upsert_vote(
                Vote(
                    proposal_id=proposal_id,
                    user_id=user_id,
                    vote_type=resolved_type,
                    rationale=rationale,
                    created_at=now,
                    updated_at=now,
                )
            )

            votes = await self._proposal_repository.list_votes(proposal_id)
            active = await self._meeting_repository.list_active_participants(
                proposal.meeting_id
            )
            decision = evaluate_votes(
                votes,
                frozenset(participant.user_id for participant in active),
                self._threshold,
            )

            if decision.is_decided:
                proposal = proposal.decide(decision.status, now)
                await self._proposal_repository.update(proposal)

        if self._metrics is not None:
            self._metrics.record_vote(resolved_type)
            if decision.is_decided:
                self._metrics.record_proposal_decision(decision.status, "automatic")

        log.info(
            "vote_cast",
            vote_type=resolved_type.value,
            votes_cast=decision.votes_cast,
            active_participants=decision.active_participants,
        )
        if decision.status == ProposalStatus.BLOCKED:
            log.info(
                "proposal_blocked",
                blocked_by=sorted(str(user) for user in decision.blocked_by),
            )
        elif decision.status == ProposalStatus.PASSED:
            log.info(
                "proposal_passed",
                supporting=decision.supporting,
                required_support=decision.required_support,
            )

        return VoteOutcome(vote=stored, proposal=proposal, decision=decision)

    async def withdraw(self, proposal_id: UUID, user_id: UUID) -> Proposal:
        """Withdraw an ACTIVE proposal. Only its proposer may do so.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
            NotProposerError: Caller did not make the proposal.
            ProposalNotActiveError: Proposal already decided.
        """
        log = logger.bind(proposal_id=str(proposal_id), user_id=str(user_id))

        async with self._locks.hold(proposal_id):
            proposal = await self._load_proposal(proposal_id, log)
            if proposal.proposer_id != user_id:
                log.warning("proposal_withdraw_rejected", reason="not_proposer")
                raise NotProposerError(proposal_id, user_id)
            self._require_active_proposal(proposal, log)

            withdrawn = proposal.decide(ProposalStatus.WITHDRAWN, self._time.now())
            await self._proposal_repository.update(withdrawn)

        if self._metrics is not None:
            self._metrics.record_proposal_decision(ProposalStatus.WITHDRAWN, "withdrawn")
        log.info("proposal_withdrawn")
        return withdrawn

    async def set_status(
        self,
        proposal_id: UUID,
        facilitator_id: UUID,
        status: ProposalStatus | str,
    ) -> Proposal:
        """Force a proposal into ``status``. Facilitator only.

        This override may reopen a decided proposal. ``decided_at`` is
        stamped for decided statuses and cleared for ACTIVE.

        Raises:
            InvalidProposalStatusError: Unknown status.
            ProposalNotFoundError: Proposal does not exist.
            FacilitatorRequiredError: Caller is not a facilitator of the meeting.
        """
        log = logger.bind(proposal_id=str(proposal_id), facilitator_id=str(facilitator_id))

        try:
            target = parse_proposal_status(status)
        except InvalidProposalStatusError:
            log.warning("proposal_override_rejected", reason="invalid_status", status=status)
            raise

        async with self._locks.hold(proposal_id):
            proposal = await self._load_proposal(proposal_id, log)
            participant = await self._meeting_repository.get_participant(
                proposal.meeting_id, facilitator_id
            )
            if participant is None or not participant.is_facilitator:
                log.warning("facilitator_required", operation="set proposal status")
                raise FacilitatorRequiredError(
                    proposal.meeting_id, facilitator_id, "set proposal status"
                )

            previous = proposal.status
            updated = proposal.decide(target, self._time.now())
            await self._proposal_repository.update(updated)

        if self._metrics is not None:
            self._metrics.record_proposal_decision(target, "override")
        log.info(
            "proposal_status_overridden",
            previous_status=previous.value,
            status=target.value,
        )
        return updated

    async def get_proposal(self, proposal_id: UUID) -> Proposal:
        """Return the proposal.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
        """
        return await self._load_proposal(proposal_id, logger.bind(proposal_id=str(proposal_id)))

    async def list_proposals(self, meeting_id: UUID) -> list[Proposal]:
        """Return the meeting's proposals, newest first."""
        return await self._proposal_repository.list_by_meeting(meeting_id)

    async def get_tally(self, proposal_id: UUID) -> VoteTally:
        """Summarize the votes on a proposal.

        Raises:
            ProposalNotFoundError: Proposal does not exist.
        """
        proposal = await self._load_proposal(
            proposal_id, logger.bind(proposal_id=str(proposal_id))
        )
        votes = await self._proposal_repository.list_votes(proposal_id)
        active = await self._meeting_repository.list_active_participants(
            proposal.meeting_id
        )

        counts = {vote_type: 0 for vote_type in VoteType}
        for vote in votes:
            counts[vote.vote_type] += 1
        voter_ids = frozenset(vote.user_id for vote in votes)
        active_ids = frozenset(participant.user_id for participant in active)

        return VoteTally(
            proposal_id=proposal_id,
            status=proposal.status,
            counts=counts,
            voter_ids=voter_ids,
            outstanding_ids=active_ids - voter_ids,
            active_participant_count=len(active_ids),
        )

    async def _load_proposal(self, proposal_id: UUID, log) -> Proposal:
        proposal = await self._proposal_repository.get(proposal_id)
        if proposal is None:
            log.warning("proposal_not_found")
            raise ProposalNotFoundError(proposal_id)
        return proposal

    @staticmethod
    def _require_active_proposal(proposal: Proposal, log) -> None:
        if not proposal.is_active:
            log.warning("proposal_not_active", status=proposal.status.value)
            raise ProposalNotActiveError(proposal.id, proposal.status)

    async def _require_active_participant(self, meeting_id: UUID, user_id: UUID, log) -> None:
        participant = await self._meeting_repository.get_participant(meeting_id, user_id)
        if participant is None or not participant.is_active:
            log.warning("participant_required", meeting_id=str(meeting_id))
            raise NotParticipantError(meeting_id, user_id)
