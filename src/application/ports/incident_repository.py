"""Incident report repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.incident import IncidentReport


class IncidentRepositoryProtocol(Protocol):
    """Protocol for incident report persistence."""

    async def save(self, incident: IncidentReport) -> None:
        """Store a new incident.

        Raises:
            ValueError: If the id already exists.
        """
        ...

    async def get(self, incident_id: UUID) -> IncidentReport | None:
        ...

    async def update(self, incident: IncidentReport) -> None:
        """Replace the stored incident with the same id.

        Raises:
            KeyError: If the incident does not exist.
        """
        ...

    async def list_by_meeting(self, meeting_id: UUID) -> list[IncidentReport]:
        """Return incidents of a meeting, newest first."""
        ...
