"""Record factories for unit tests.

Each factory fills every required field with a sensible default so tests
only spell out what they are about.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID, uuid4

from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.domain.models.incident import IncidentReport, IncidentStatus, IncidentType
from src.domain.models.meeting import (
    Meeting,
    MeetingSettings,
    Participant,
    ParticipantRole,
)
from src.domain.models.proposal import Proposal, ProposalStatus, Vote, VoteType
from src.domain.models.queue_item import QueueItem, QueueItemStatus, QueueItemType
from tests.helpers.fake_time_authority import DEFAULT_FAKE_TIME

T0 = DEFAULT_FAKE_TIME


def at(seconds: float) -> datetime:
    """Return T0 plus ``seconds``."""
    return T0 + timedelta(seconds=seconds)


def make_queue_item(
    user_id: UUID | None = None,
    item_type: QueueItemType | None = QueueItemType.HAND,
    created_at: datetime = T0,
    status: QueueItemStatus = QueueItemStatus.WAITING,
    tags: frozenset[str] | set[str] = frozenset(),
    meeting_id: UUID | None = None,
    completed_at: datetime | None = None,
) -> QueueItem:
    return QueueItem(
        id=uuid4(),
        meeting_id=meeting_id or uuid4(),
        user_id=user_id or uuid4(),
        type=item_type,
        status=status,
        created_at=created_at,
        completed_at=completed_at,
        tags=frozenset(tags),
    )


def make_meeting(
    settings: MeetingSettings | None = None,
    pin: str = "ABC123",
    is_active: bool = True,
) -> Meeting:
    return Meeting(
        id=uuid4(),
        title="Weekly sync",
        pin=pin,
        settings=settings or MeetingSettings(),
        created_at=T0,
        is_active=is_active,
    )


def make_participant(
    meeting_id: UUID,
    user_id: UUID | None = None,
    role: ParticipantRole = ParticipantRole.PARTICIPANT,
    left_at: datetime | None = None,
) -> Participant:
    return Participant(
        meeting_id=meeting_id,
        user_id=user_id or uuid4(),
        role=role,
        joined_at=T0,
        left_at=left_at,
    )


def make_proposal(
    meeting_id: UUID,
    proposer_id: UUID,
    status: ProposalStatus = ProposalStatus.ACTIVE,
) -> Proposal:
    return Proposal(
        id=uuid4(),
        meeting_id=meeting_id,
        proposer_id=proposer_id,
        title="Adopt the agenda",
        status=status,
        created_at=T0,
    )


def make_vote(
    user_id: UUID,
    vote_type: VoteType,
    proposal_id: UUID | None = None,
) -> Vote:
    return Vote(
        proposal_id=proposal_id or uuid4(),
        user_id=user_id,
        vote_type=vote_type,
        created_at=T0,
        updated_at=T0,
    )


def make_incident(
    meeting_id: UUID,
    created_at: datetime = T0,
    urgent: bool = False,
    status: IncidentStatus = IncidentStatus.OPEN,
) -> IncidentReport:
    return IncidentReport(
        id=uuid4(),
        meeting_id=meeting_id,
        reporter_id=uuid4(),
        type=IncidentType.OTHER,
        description="Concern raised",
        urgent=urgent,
        anonymous=False,
        status=status,
        created_at=created_at,
    )


@dataclass
class SeededMeeting:
    """A stored meeting with one facilitator and three participants."""

    meeting: Meeting
    facilitator_id: UUID
    alice: UUID
    bob: UUID
    charlie: UUID

    @property
    def id(self) -> UUID:
        return self.meeting.id

    @property
    def participant_ids(self) -> tuple[UUID, UUID, UUID, UUID]:
        return (self.facilitator_id, self.alice, self.bob, self.charlie)


async def seed_meeting(
    meeting_repo: MeetingRepositoryProtocol,
    settings: MeetingSettings | None = None,
    pin: str = "ABC123",
) -> SeededMeeting:
    """Store a meeting with a facilitator and participants Alice, Bob and Charlie."""
    meeting = make_meeting(settings=settings, pin=pin)
    await meeting_repo.save(meeting)

    facilitator_id, alice, bob, charlie = uuid4(), uuid4(), uuid4(), uuid4()
    await meeting_repo.save_participant(
        make_participant(meeting.id, facilitator_id, ParticipantRole.FACILITATOR)
    )
    for user_id in (alice, bob, charlie):
        await meeting_repo.save_participant(make_participant(meeting.id, user_id))

    return SeededMeeting(meeting, facilitator_id, alice, bob, charlie)
