"""Meeting management service.

Creates meetings with join PINs, admits and releases participants,
updates facilitation settings and ends meetings. Settings changes and
ending a meeting are facilitator-only.
"""

from __future__ import annotations

import secrets
import string
from collections.abc import Mapping
from typing import Any
from uuid import UUID, uuid4

import structlog

from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.config.facilitation_config import (
    DEFAULT_FACILITATION_CONFIG,
    FacilitationConfig,
)
from src.domain.errors import (
    AlreadyParticipantError,
    FacilitatorRequiredError,
    InvalidMeetingSettingsError,
    MeetingInactiveError,
    MeetingNotFoundError,
    ParticipantNotFoundError,
    PinAllocationError,
)
from src.domain.models.meeting import (
    Meeting,
    MeetingSettings,
    Participant,
    ParticipantRole,
)

logger = structlog.get_logger(__name__)

PIN_ALPHABET = string.ascii_uppercase + string.digits


def generate_pin(length: int) -> str:
    """Return a random PIN of upper-case letters and digits."""
    return "".join(secrets.choice(PIN_ALPHABET) for _ in range(length))


class MeetingService:
    """Manages meetings and their participants.

    Example:
        >>> service = MeetingService(meeting_repo, time_authority)
        >>> meeting = await service.create_meeting(
        ...     "Weekly sync",
        ...     settings_overrides={"progressive_stack": True},
        ...     creator_id=facilitator_id,
        ... )
        >>> await service.join_meeting(meeting.pin, user_id)
    """

    def __init__(
        self,
        meeting_repository: MeetingRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        config: FacilitationConfig = DEFAULT_FACILITATION_CONFIG,
    ) -> None:
        """Initialize the meeting service.

        Args:
            meeting_repository: Store of meetings and participants.
            time_authority: Clock for every timestamp written.
            config: Supplies PIN length and allocation attempts.
        """
        self._meeting_repository = meeting_repository
        self._time = time_authority
        self._pin_length = config.pin_length
        self._pin_attempts = config.pin_attempts

    async def create_meeting(
        self,
        title: str,
        description: str | None = None,
        settings_overrides: Mapping[str, Any] | None = None,
        creator_id: UUID | None = None,
    ) -> Meeting:
        """Create an active meeting with a fresh PIN.

        Args:
            title: Display title.
            description: Optional description.
            settings_overrides: Settings merged onto the defaults.
            creator_id: When given, registered as the meeting's FACILITATOR.

        Returns:
            The created meeting.

        Raises:
            InvalidMeetingSettingsError: Unknown or out-of-range settings.
            PinAllocationError: No unused PIN found.
        """
        log = logger.bind(title=title)
        settings = self._build_settings(settings_overrides, None, log)
        pin = await self._allocate_pin(log)

        now = self._time.now()
        meeting = Meeting(
            id=uuid4(),
            title=title,
            description=description,
            pin=pin,
            settings=settings,
            created_at=now,
        )
        await self._meeting_repository.save(meeting)

        if creator_id is not None:
            await self._meeting_repository.save_participant(
                Participant(
                    meeting_id=meeting.id,
                    user_id=creator_id,
                    role=ParticipantRole.FACILITATOR,
                    joined_at=now,
                )
            )

        log.info(
            "meeting_created",
            meeting_id=str(meeting.id),
            progressive_stack=settings.progressive_stack,
            has_facilitator=creator_id is not None,
        )
        return meeting

    async def get_meeting(self, meeting_id: UUID) -> Meeting:
        """Return the meeting.

        Raises:
            MeetingNotFoundError: Meeting does not exist.
        """
        meeting = await self._meeting_repository.get(meeting_id)
        if meeting is None:
            logger.warning("meeting_not_found", meeting_id=str(meeting_id))
            raise MeetingNotFoundError(meeting_id)
        return meeting

    async def list_participants(self, meeting_id: UUID) -> list[Participant]:
        await self.get_meeting(meeting_id)
        return await self._meeting_repository.list_participants(meeting_id)

    async def join_meeting(
        self,
        pin: str,
        user_id: UUID,
        role: ParticipantRole = ParticipantRole.PARTICIPANT,
    ) -> Participant:
        """Join a meeting by PIN.

        A user who left earlier rejoins with the requested role.

        Raises:
            MeetingNotFoundError: No meeting has this PIN.
            MeetingInactiveError: Meeting has ended.
            AlreadyParticipantError: User is already an active participant.
        """
        normalized = pin.strip().upper()
        log = logger.bind(pin=normalized, user_id=str(user_id))

        meeting = await self._meeting_repository.get_by_pin(normalized)
        if meeting is None:
            log.warning("meeting_pin_not_found")
            raise MeetingNotFoundError(normalized)
        log = log.bind(meeting_id=str(meeting.id))
        if not meeting.is_active:
            log.warning("meeting_inactive")
            raise MeetingInactiveError(meeting.id)

        now = self._time.now()
        existing = await self._meeting_repository.get_participant(meeting.id, user_id)
        if existing is not None and existing.is_active:
            log.warning("meeting_join_rejected", reason="already_participant")
            raise AlreadyParticipantError(meeting.id, user_id)

        if existing is not None:
            participant = existing.rejoin(now, role)
            await self._meeting_repository.update_participant(participant)
            log.info("participant_rejoined", role=role.value)
        else:
            participant = Participant(
                meeting_id=meeting.id,
                user_id=user_id,
                role=role,
                joined_at=now,
            )
            await self._meeting_repository.save_participant(participant)
            log.info("participant_joined", role=role.value)
        return participant

    async def leave_meeting(self, meeting_id: UUID, user_id: UUID) -> Participant:
        """Mark a participant as having left.

        Leaving twice is a no-op that returns the existing record.

        Raises:
            MeetingNotFoundError: Meeting does not exist.
            ParticipantNotFoundError: User never joined the meeting.
        """
        log = logger.bind(meeting_id=str(meeting_id), user_id=str(user_id))
        await self.get_meeting(meeting_id)

        participant = await self._meeting_repository.get_participant(meeting_id, user_id)
        if participant is None:
            log.warning("participant_not_found")
            raise ParticipantNotFoundError(meeting_id, user_id)
        if not participant.is_active:
            return participant

        departed = participant.leave(self._time.now())
        await self._meeting_repository.update_participant(departed)
        log.info("participant_left")
        return departed

    async def update_settings(
        self,
        meeting_id: UUID,
        facilitator_id: UUID,
        overrides: Mapping[str, Any],
    ) -> Meeting:
        """Merge ``overrides`` onto the meeting's current settings.

        Raises:
            MeetingNotFoundError: Meeting does not exist.
            FacilitatorRequiredError: Caller is not a facilitator.
            InvalidMeetingSettingsError: Unknown or out-of-range settings.
        """
        log = logger.bind(meeting_id=str(meeting_id), facilitator_id=str(facilitator_id))
        meeting = await self.get_meeting(meeting_id)
        await self._require_facilitator(meeting_id, facilitator_id, "update settings", log)

        settings = self._build_settings(overrides, meeting.settings, log)
        updated = meeting.with_settings(settings)
        await self._meeting_repository.update(updated)
        log.info("meeting_settings_updated", changed=sorted(overrides))
        return updated

    async def end_meeting(self, meeting_id: UUID, facilitator_id: UUID) -> Meeting:
        """End the meeting. Queue and vote operations are rejected afterwards.

        Raises:
            MeetingNotFoundError: Meeting does not exist.
            FacilitatorRequiredError: Caller is not a facilitator.
            MeetingInactiveError: Meeting has already ended.
        """
        log = logger.bind(meeting_id=str(meeting_id), facilitator_id=str(facilitator_id))
        meeting = await self.get_meeting(meeting_id)
        await self._require_facilitator(meeting_id, facilitator_id, "end meeting", log)
        if not meeting.is_active:
            log.warning("meeting_inactive")
            raise MeetingInactiveError(meeting_id)

        ended = meeting.end(self._time.now())
        await self._meeting_repository.update(ended)
        log.info("meeting_ended")
        return ended

    async def _allocate_pin(self, log) -> str:
        for _ in range(self._pin_attempts):
            pin = generate_pin(self._pin_length)
            if await self._meeting_repository.get_by_pin(pin) is None:
                return pin
        log.error("pin_allocation_failed", attempts=self._pin_attempts)
        raise PinAllocationError(self._pin_attempts)

    @staticmethod
    def _build_settings(
        overrides: Mapping[str, Any] | None,
        base: MeetingSettings | None,
        log,
    ) -> MeetingSettings:
        try:
            return MeetingSettings.from_mapping(overrides, base)
        except (TypeError, ValueError) as exc:
            log.warning("meeting_settings_rejected", detail=str(exc))
            raise InvalidMeetingSettingsError(str(exc)) from exc

    async def _require_facilitator(
        self,
        meeting_id: UUID,
        user_id: UUID,
        operation: str,
        log,
    ) -> None:
        participant = await self._meeting_repository.get_participant(meeting_id, user_id)
        if participant is None or not participant.is_facilitator:
            log.warning("facilitator_required", operation=operation)
            raise FacilitatorRequiredError(meeting_id, user_id, operation)
