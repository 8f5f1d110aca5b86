"""In-memory stub for MeetingRepositoryProtocol.

Simulates the unique PIN constraint and the (meeting, user) key on
participants.
"""

from __future__ import annotations

from uuid import UUID

from src.domain.models.meeting import Meeting, Participant


class MeetingRepositoryStub:
    """In-memory stub implementation of MeetingRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize empty stub."""
        self._meetings: dict[UUID, Meeting] = {}
        self._pins: dict[str, UUID] = {}
        # Key: (meeting_id, user_id). Dict preserves join order.
        self._participants: dict[tuple[UUID, UUID], Participant] = {}

    async def save(self, meeting: Meeting) -> None:
        if meeting.id in self._meetings:
            raise ValueError(f"Meeting {meeting.id} already exists")
        if meeting.pin in self._pins:
            raise ValueError(f"PIN {meeting.pin} is already in use")
        self._meetings[meeting.id] = meeting
        self._pins[meeting.pin] = meeting.id

    async def get(self, meeting_id: UUID) -> Meeting | None:
        return self._meetings.get(meeting_id)

    async def get_by_pin(self, pin: str) -> Meeting | None:
        meeting_id = self._pins.get(pin)
        return self._meetings.get(meeting_id) if meeting_id is not None else None

    async def update(self, meeting: Meeting) -> None:
        if meeting.id not in self._meetings:
            raise KeyError(meeting.id)
        self._meetings[meeting.id] = meeting

    async def save_participant(self, participant: Participant) -> None:
        key = (participant.meeting_id, participant.user_id)
        if key in self._participants:
            raise ValueError(
                f"User {participant.user_id} already has a record in "
                f"meeting {participant.meeting_id}"
            )
        self._participants[key] = participant

    async def update_participant(self, participant: Participant) -> None:
        key = (participant.meeting_id, participant.user_id)
        if key not in self._participants:
            raise KeyError(key)
        self._participants[key] = participant

    async def get_participant(
        self,
        meeting_id: UUID,
        user_id: UUID,
    ) -> Participant | None:
        return self._participants.get((meeting_id, user_id))

    async def list_participants(self, meeting_id: UUID) -> list[Participant]:
        return [
            participant
            for (participant_meeting_id, _), participant in self._participants.items()
            if participant_meeting_id == meeting_id
        ]

    async def list_active_participants(self, meeting_id: UUID) -> list[Participant]:
        return [
            participant
            for participant in await self.list_participants(meeting_id)
            if participant.is_active
        ]

    def clear(self) -> None:
        """Clear all stored data (for testing)."""
        self._meetings.clear()
        self._pins.clear()
        self._participants.clear()
