"""Bootstrap wiring for facilitation dependencies.

Repositories default to the in-memory stubs. A deployment with durable
storage installs its repositories with the ``set_*`` functions before
the first service is requested. Services that write the same meetings
share one KeyedLock.
"""

from __future__ import annotations

from src.application.ports.facilitation_metrics import FacilitationMetricsProtocol
from src.application.ports.incident_repository import IncidentRepositoryProtocol
from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.application.ports.proposal_repository import ProposalRepositoryProtocol
from src.application.ports.queue_item_repository import QueueItemRepositoryProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.services.consensus_service import ConsensusService
from src.application.services.direct_response_rate_limiter import (
    DirectResponseRateLimiter,
)
from src.application.services.incident_service import IncidentService
from src.application.services.keyed_lock import KeyedLock
from src.application.services.meeting_export_service import MeetingExportService
from src.application.services.meeting_service import MeetingService
from src.application.services.queue_lifecycle_service import QueueLifecycleService
from src.application.services.recent_speaker_tracker import RecentSpeakerTracker
from src.application.services.stack_query_service import StackQueryService
from src.config.facilitation_config import FacilitationConfig
from src.infrastructure.adapters.time_authority import SystemTimeAuthority
from src.infrastructure.monitoring.facilitation_metrics import (
    get_facilitation_metrics_collector,
)
from src.infrastructure.stubs.incident_repository_stub import IncidentRepositoryStub
from src.infrastructure.stubs.meeting_repository_stub import MeetingRepositoryStub
from src.infrastructure.stubs.proposal_repository_stub import ProposalRepositoryStub
from src.infrastructure.stubs.queue_item_repository_stub import (
    QueueItemRepositoryStub,
)

_config: FacilitationConfig | None = None
_time_authority: TimeAuthorityProtocol | None = None
_metrics: FacilitationMetricsProtocol | None = None
_queue_repository: QueueItemRepositoryProtocol | None = None
_meeting_repository: MeetingRepositoryProtocol | None = None
_proposal_repository: ProposalRepositoryProtocol | None = None
_incident_repository: IncidentRepositoryProtocol | None = None
_meeting_locks: KeyedLock | None = None
_proposal_locks: KeyedLock | None = None


def get_facilitation_config() -> FacilitationConfig:
    """Get facilitation config, read from the environment on first use."""
    global _config
    if _config is None:
        _config = FacilitationConfig.from_environment()
    return _config


def get_time_authority() -> TimeAuthorityProtocol:
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_facilitation_metrics() -> FacilitationMetricsProtocol:
    global _metrics
    if _metrics is None:
        _metrics = get_facilitation_metrics_collector()
    return _metrics


def get_queue_item_repository() -> QueueItemRepositoryProtocol:
    """Get queue item repository instance."""
    global _queue_repository
    if _queue_repository is None:
        _queue_repository = QueueItemRepositoryStub()
    return _queue_repository


def get_meeting_repository() -> MeetingRepositoryProtocol:
    """Get meeting repository instance."""
    global _meeting_repository
    if _meeting_repository is None:
        _meeting_repository = MeetingRepositoryStub()
    return _meeting_repository


def get_proposal_repository() -> ProposalRepositoryProtocol:
    """Get proposal repository instance."""
    global _proposal_repository
    if _proposal_repository is None:
        _proposal_repository = ProposalRepositoryStub()
    return _proposal_repository


def get_incident_repository() -> IncidentRepositoryProtocol:
    """Get incident repository instance."""
    global _incident_repository
    if _incident_repository is None:
        _incident_repository = IncidentRepositoryStub()
    return _incident_repository


def _get_meeting_locks() -> KeyedLock:
    global _meeting_locks
    if _meeting_locks is None:
        _meeting_locks = KeyedLock()
    return _meeting_locks


def _get_proposal_locks() -> KeyedLock:
    global _proposal_locks
    if _proposal_locks is None:
        _proposal_locks = KeyedLock()
    return _proposal_locks


def get_recent_speaker_tracker() -> RecentSpeakerTracker:
    return RecentSpeakerTracker(
        queue_repository=get_queue_item_repository(),
        time_authority=get_time_authority(),
        config=get_facilitation_config(),
    )


def get_direct_response_rate_limiter() -> DirectResponseRateLimiter:
    return DirectResponseRateLimiter(
        queue_repository=get_queue_item_repository(),
        time_authority=get_time_authority(),
        config=get_facilitation_config(),
    )


def get_queue_lifecycle_service() -> QueueLifecycleService:
    """Get a lifecycle service sharing the process-wide meeting locks."""
    return QueueLifecycleService(
        queue_repository=get_queue_item_repository(),
        meeting_repository=get_meeting_repository(),
        rate_limiter=get_direct_response_rate_limiter(),
        time_authority=get_time_authority(),
        locks=_get_meeting_locks(),
        metrics=get_facilitation_metrics(),
    )


def get_stack_query_service() -> StackQueryService:
    return StackQueryService(
        queue_repository=get_queue_item_repository(),
        meeting_repository=get_meeting_repository(),
        recent_speaker_tracker=get_recent_speaker_tracker(),
    )


def get_consensus_service() -> ConsensusService:
    """Get a consensus service sharing the process-wide proposal locks."""
    return ConsensusService(
        proposal_repository=get_proposal_repository(),
        meeting_repository=get_meeting_repository(),
        time_authority=get_time_authority(),
        config=get_facilitation_config(),
        locks=_get_proposal_locks(),
        metrics=get_facilitation_metrics(),
    )


def get_meeting_service() -> MeetingService:
    return MeetingService(
        meeting_repository=get_meeting_repository(),
        time_authority=get_time_authority(),
        config=get_facilitation_config(),
    )


def get_meeting_export_service() -> MeetingExportService:
    return MeetingExportService(
        meeting_repository=get_meeting_repository(),
        queue_repository=get_queue_item_repository(),
        proposal_repository=get_proposal_repository(),
    )


def get_incident_service() -> IncidentService:
    return IncidentService(
        incident_repository=get_incident_repository(),
        meeting_repository=get_meeting_repository(),
        time_authority=get_time_authority(),
        metrics=get_facilitation_metrics(),
    )


def reset_facilitation_dependencies() -> None:
    """Reset all singleton instances for testing."""
    global _config
    global _time_authority
    global _metrics
    global _queue_repository
    global _meeting_repository
    global _proposal_repository
    global _incident_repository
    global _meeting_locks
    global _proposal_locks

    _config = None
    _time_authority = None
    _metrics = None
    _queue_repository = None
    _meeting_repository = None
    _proposal_repository = None
    _incident_repository = None
    _meeting_locks = None
    _proposal_locks = None


def set_facilitation_config(config: FacilitationConfig) -> None:
    """Set custom config for testing."""
    global _config
    _config = config


def set_time_authority(time_authority: TimeAuthorityProtocol) -> None:
    """Set custom time authority for testing."""
    global _time_authority
    _time_authority = time_authority


def set_facilitation_metrics(metrics: FacilitationMetricsProtocol) -> None:
    """Set custom metrics recorder for testing."""
    global _metrics
    _metrics = metrics


def set_queue_item_repository(repo: QueueItemRepositoryProtocol) -> None:
    """Set custom queue item repository."""
    global _queue_repository
    _queue_repository = repo


def set_meeting_repository(repo: MeetingRepositoryProtocol) -> None:
    """Set custom meeting repository."""
    global _meeting_repository
    _meeting_repository = repo


def set_proposal_repository(repo: ProposalRepositoryProtocol) -> None:
    """Set custom proposal repository."""
    global _proposal_repository
    _proposal_repository = repo


def set_incident_repository(repo: IncidentRepositoryProtocol) -> None:
    """Set custom incident repository."""
    global _incident_repository
    _incident_repository = repo
