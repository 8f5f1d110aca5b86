"""Infrastructure stubs for development and testing.

This module provides in-memory implementations of the repository ports
for use in development and testing environments.

Available stubs:
- QueueItemRepositoryStub: Speaking requests, insertion-ordered
- MeetingRepositoryStub: Meetings with unique PINs and participants
- ProposalRepositoryStub: Proposals and votes keyed by (proposal, user)
- IncidentRepositoryStub: Incident reports, newest first per meeting

WARNING: These stubs are NOT for production use. A deployment supplies
transactional repositories implementing the same protocols.
"""

from src.infrastructure.stubs.incident_repository_stub import IncidentRepositoryStub
from src.infrastructure.stubs.meeting_repository_stub import MeetingRepositoryStub
from src.infrastructure.stubs.proposal_repository_stub import ProposalRepositoryStub
from src.infrastructure.stubs.queue_item_repository_stub import (
    QueueItemRepositoryStub,
)

__all__: list[str] = [
    "IncidentRepositoryStub",
    "MeetingRepositoryStub",
    "ProposalRepositoryStub",
    "QueueItemRepositoryStub",
]
