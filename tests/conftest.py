"""
Pytest configuration and shared fixtures for Stack Keeper tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Services are exercised against the in-memory repository stubs
- Time-dependent tests use FakeTimeAuthority, never the system clock
"""

from __future__ import annotations

import pytest

from src.application.services.consensus_service import ConsensusService
from src.application.services.incident_service import IncidentService
from src.application.services.direct_response_rate_limiter import (
    DirectResponseRateLimiter,
)
from src.application.services.keyed_lock import KeyedLock
from src.application.services.meeting_export_service import MeetingExportService
from src.application.services.meeting_service import MeetingService
from src.application.services.queue_lifecycle_service import QueueLifecycleService
from src.application.services.recent_speaker_tracker import RecentSpeakerTracker
from src.application.services.stack_query_service import StackQueryService
from src.config.facilitation_config import (
    TEST_FACILITATION_CONFIG,
    FacilitationConfig,
)
from src.infrastructure.stubs.incident_repository_stub import IncidentRepositoryStub
from src.infrastructure.stubs.meeting_repository_stub import MeetingRepositoryStub
from src.infrastructure.stubs.proposal_repository_stub import ProposalRepositoryStub
from src.infrastructure.stubs.queue_item_repository_stub import (
    QueueItemRepositoryStub,
)
from tests.helpers.factories import SeededMeeting, seed_meeting
from tests.helpers.fake_time_authority import FakeTimeAuthority


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from src import __version__

    return __version__


@pytest.fixture
def fake_time() -> FakeTimeAuthority:
    """Clock frozen at 2026-01-01T00:00:00 UTC."""
    return FakeTimeAuthority()


@pytest.fixture
def config() -> FacilitationConfig:
    return TEST_FACILITATION_CONFIG


@pytest.fixture
def queue_repo() -> QueueItemRepositoryStub:
    return QueueItemRepositoryStub()


@pytest.fixture
def meeting_repo() -> MeetingRepositoryStub:
    return MeetingRepositoryStub()


@pytest.fixture
def proposal_repo() -> ProposalRepositoryStub:
    return ProposalRepositoryStub()


@pytest.fixture
def incident_repo() -> IncidentRepositoryStub:
    return IncidentRepositoryStub()


@pytest.fixture
def tracker(
    queue_repo: QueueItemRepositoryStub,
    fake_time: FakeTimeAuthority,
    config: FacilitationConfig,
) -> RecentSpeakerTracker:
    return RecentSpeakerTracker(queue_repo, fake_time, config)


@pytest.fixture
def rate_limiter(
    queue_repo: QueueItemRepositoryStub,
    fake_time: FakeTimeAuthority,
    config: FacilitationConfig,
) -> DirectResponseRateLimiter:
    return DirectResponseRateLimiter(queue_repo, fake_time, config)


@pytest.fixture
def lifecycle(
    queue_repo: QueueItemRepositoryStub,
    meeting_repo: MeetingRepositoryStub,
    rate_limiter: DirectResponseRateLimiter,
    fake_time: FakeTimeAuthority,
) -> QueueLifecycleService:
    return QueueLifecycleService(
        queue_repository=queue_repo,
        meeting_repository=meeting_repo,
        rate_limiter=rate_limiter,
        time_authority=fake_time,
        locks=KeyedLock(),
    )


@pytest.fixture
def stack_query(
    queue_repo: QueueItemRepositoryStub,
    meeting_repo: MeetingRepositoryStub,
    tracker: RecentSpeakerTracker,
) -> StackQueryService:
    return StackQueryService(queue_repo, meeting_repo, tracker)


@pytest.fixture
def consensus(
    proposal_repo: ProposalRepositoryStub,
    meeting_repo: MeetingRepositoryStub,
    fake_time: FakeTimeAuthority,
    config: FacilitationConfig,
) -> ConsensusService:
    return ConsensusService(
        proposal_repository=proposal_repo,
        meeting_repository=meeting_repo,
        time_authority=fake_time,
        config=config,
    )


@pytest.fixture
def meeting_service(
    meeting_repo: MeetingRepositoryStub,
    fake_time: FakeTimeAuthority,
    config: FacilitationConfig,
) -> MeetingService:
    return MeetingService(meeting_repo, fake_time, config)


@pytest.fixture
def export_service(
    meeting_repo: MeetingRepositoryStub,
    queue_repo: QueueItemRepositoryStub,
    proposal_repo: ProposalRepositoryStub,
) -> MeetingExportService:
    return MeetingExportService(meeting_repo, queue_repo, proposal_repo)


@pytest.fixture
def incident_service(
    incident_repo: IncidentRepositoryStub,
    meeting_repo: MeetingRepositoryStub,
    fake_time: FakeTimeAuthority,
) -> IncidentService:
    return IncidentService(incident_repo, meeting_repo, fake_time)


@pytest.fixture
async def seeded(meeting_repo: MeetingRepositoryStub) -> SeededMeeting:
    """Default-settings meeting with a facilitator and three participants."""
    return await seed_meeting(meeting_repo)
