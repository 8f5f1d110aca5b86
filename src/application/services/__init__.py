"""Application services - Use case orchestration.

This module contains application services that orchestrate domain
operations and coordinate with infrastructure adapters.

Available services:
- QueueLifecycleService: Join, remove, start/end speaker, reorder annotations
- StackQueryService: Ordered and explained view of the speaking stack
- RecentSpeakerTracker: Users who spoke recently in a meeting
- DirectResponseRateLimiter: Per-user direct-response quota
- ConsensusService: Proposals, votes and consensus resolution
- MeetingService: Meetings, PINs, participants and settings
- MeetingExportService: JSON, CSV and Markdown meeting exports
- IncidentService: Safety incident reports and facilitator triage
- KeyedLock: Per-meeting and per-proposal serialization
"""

from src.application.services.consensus_service import (
    ConsensusService,
    VoteOutcome,
    parse_proposal_status,
    parse_vote_type,
)
from src.application.services.direct_response_rate_limiter import (
    DirectResponseQuota,
    DirectResponseRateLimiter,
)
from src.application.services.incident_service import (
    IncidentService,
    parse_incident_status,
    parse_incident_type,
)
from src.application.services.keyed_lock import KeyedLock
from src.application.services.meeting_export_service import (
    ExportFormat,
    MeetingExportService,
)
from src.application.services.meeting_service import MeetingService, generate_pin
from src.application.services.queue_lifecycle_service import (
    QueueLifecycleService,
    parse_queue_item_type,
)
from src.application.services.recent_speaker_tracker import RecentSpeakerTracker
from src.application.services.stack_query_service import StackQueryService

__all__ = [
    "ConsensusService",
    "DirectResponseQuota",
    "DirectResponseRateLimiter",
    "ExportFormat",
    "IncidentService",
    "KeyedLock",
    "MeetingExportService",
    "MeetingService",
    "QueueLifecycleService",
    "RecentSpeakerTracker",
    "StackQueryService",
    "VoteOutcome",
    "generate_pin",
    "parse_incident_status",
    "parse_incident_type",
    "parse_proposal_status",
    "parse_queue_item_type",
    "parse_vote_type",
]
