"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- QueueItemRepositoryProtocol: Speaking request persistence
- MeetingRepositoryProtocol: Meeting, settings and participant persistence
- ProposalRepositoryProtocol: Proposal and vote persistence
- IncidentRepositoryProtocol: Safety incident report persistence
- TimeAuthorityProtocol: Current time
- FacilitationMetricsProtocol: Queue and consensus metrics
"""

from src.application.ports.facilitation_metrics import FacilitationMetricsProtocol
from src.application.ports.incident_repository import IncidentRepositoryProtocol
from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.application.ports.proposal_repository import ProposalRepositoryProtocol
from src.application.ports.queue_item_repository import QueueItemRepositoryProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = [
    "FacilitationMetricsProtocol",
    "IncidentRepositoryProtocol",
    "MeetingRepositoryProtocol",
    "ProposalRepositoryProtocol",
    "QueueItemRepositoryProtocol",
    "TimeAuthorityProtocol",
]
