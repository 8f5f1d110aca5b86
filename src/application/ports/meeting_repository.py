"""Meeting and participant repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.meeting import Meeting, Participant


class MeetingRepositoryProtocol(Protocol):
    """Protocol for meeting, settings and participant persistence."""

    async def save(self, meeting: Meeting) -> None:
        """Store a new meeting.

        Raises:
            ValueError: If the id or PIN is already taken.
        """
        ...

    async def get(self, meeting_id: UUID) -> Meeting | None:
        ...

    async def get_by_pin(self, pin: str) -> Meeting | None:
        ...

    async def update(self, meeting: Meeting) -> None:
        """Replace the stored meeting with the same id.

        Raises:
            KeyError: If the meeting does not exist.
        """
        ...

    async def save_participant(self, participant: Participant) -> None:
        """Store a new participant.

        Raises:
            ValueError: If the user already has a record in the meeting.
        """
        ...

    async def update_participant(self, participant: Participant) -> None:
        """Replace the stored record for (participant.meeting_id, participant.user_id).

        Raises:
            KeyError: If the participant does not exist.
        """
        ...

    async def get_participant(
        self,
        meeting_id: UUID,
        user_id: UUID,
    ) -> Participant | None:
        ...

    async def list_participants(self, meeting_id: UUID) -> list[Participant]:
        """Return every participant record of the meeting, in join order."""
        ...

    async def list_active_participants(self, meeting_id: UUID) -> list[Participant]:
        """Return participants of the meeting whose ``left_at`` is unset."""
        ...
