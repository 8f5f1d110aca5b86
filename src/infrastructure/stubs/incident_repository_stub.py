"""In-memory stub for IncidentRepositoryProtocol."""

from __future__ import annotations

from uuid import UUID

from src.domain.models.incident import IncidentReport


class IncidentRepositoryStub:
    """In-memory stub implementation of IncidentRepositoryProtocol."""

    def __init__(self) -> None:
        self._incidents: dict[UUID, IncidentReport] = {}

    async def save(self, incident: IncidentReport) -> None:
        if incident.id in self._incidents:
            raise ValueError(f"Incident {incident.id} already exists")
        self._incidents[incident.id] = incident

    async def get(self, incident_id: UUID) -> IncidentReport | None:
        return self._incidents.get(incident_id)

    async def update(self, incident: IncidentReport) -> None:
        if incident.id not in self._incidents:
            raise KeyError(incident.id)
        self._incidents[incident.id] = incident

    async def list_by_meeting(self, meeting_id: UUID) -> list[IncidentReport]:
        incidents = [i for i in self._incidents.values() if i.meeting_id == meeting_id]
        return sorted(incidents, key=lambda i: i.created_at, reverse=True)

    def clear(self) -> None:
        """Clear all stored data (for testing)."""
        self._incidents.clear()
