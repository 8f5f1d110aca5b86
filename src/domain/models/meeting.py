"""Meeting, meeting settings and participant domain models.

Meeting settings are owned by the meeting and are read-only to the
ordering engine and the rate limiter. Participants carry a role and an
optional ``left_at``; only participants who have not left count as
active, and consensus quorum is computed over active participants only.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

# Defaults applied when a meeting is created without explicit settings
DEFAULT_DIRECT_RESPONSE_WINDOW_SEC = 30
DEFAULT_MAX_DIRECT_RESPONSES_PER_USER = 3
DEFAULT_TIME_PER_SPEAKER_SEC = 180


class ParticipantRole(Enum):
    """Role a user holds within one meeting."""

    FACILITATOR = "FACILITATOR"
    STACK_KEEPER = "STACK_KEEPER"
    PARTICIPANT = "PARTICIPANT"
    OBSERVER = "OBSERVER"


@dataclass(frozen=True, eq=True)
class MeetingSettings:
    """Facilitation settings for one meeting.

    Attributes:
        progressive_stack: Whether progressive stack weighting applies.
        direct_response_window_sec: Caller-facing cooldown between direct
            responses. Not enforced by the rate limiter.
        max_direct_responses_per_user: Direct responses a user may raise
            within the rate limiter's lookback.
        time_per_speaker_sec: Suggested speaking time per turn.
        invite_tags: Tags that earn progressive stack priority.
    """

    progressive_stack: bool = False
    direct_response_window_sec: int = DEFAULT_DIRECT_RESPONSE_WINDOW_SEC
    max_direct_responses_per_user: int = DEFAULT_MAX_DIRECT_RESPONSES_PER_USER
    time_per_speaker_sec: int = DEFAULT_TIME_PER_SPEAKER_SEC
    invite_tags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate numeric settings."""
        if self.direct_response_window_sec < 0:
            raise ValueError(
                "direct_response_window_sec must be non-negative, "
                f"got {self.direct_response_window_sec}"
            )
        if self.max_direct_responses_per_user < 0:
            raise ValueError(
                "max_direct_responses_per_user must be non-negative, "
                f"got {self.max_direct_responses_per_user}"
            )
        if self.time_per_speaker_sec < 1:
            raise ValueError(
                f"time_per_speaker_sec must be positive, got {self.time_per_speaker_sec}"
            )

    @classmethod
    def from_mapping(
        cls,
        overrides: Mapping[str, Any] | None = None,
        base: MeetingSettings | None = None,
    ) -> MeetingSettings:
        """Build settings by merging ``overrides`` onto ``base`` (or defaults).

        Args:
            overrides: Field name to value. ``invite_tags`` may be any iterable
                of strings.
            base: Settings to start from. Defaults to ``MeetingSettings()``.

        Returns:
            New MeetingSettings instance.

        Raises:
            ValueError: If an override names an unknown setting or holds an
                invalid value.
        """
        base = base or cls()
        if not overrides:
            return base

        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown meeting settings: {sorted(unknown)}")

        values = dict(overrides)
        if "invite_tags" in values:
            values["invite_tags"] = normalize_tags(values["invite_tags"])
        return replace(base, **values)


def normalize_tags(tags: Iterable[str] | None) -> frozenset[str]:
    """Coerce tags to a frozenset. A bare string is one tag."""
    if tags is None:
        return frozenset()
    if isinstance(tags, str):
        return frozenset({tags})
    return frozenset(tags)


@dataclass(frozen=True, eq=True)
class Meeting:
    """A facilitated meeting.

    Attributes:
        id: Unique identifier.
        title: Display title.
        pin: Short join code shared with participants.
        settings: Current facilitation settings.
        created_at: Creation time.
        description: Optional longer description.
        is_active: False once the meeting has ended.
        ended_at: When the meeting ended.
    """

    id: UUID
    title: str
    pin: str
    settings: MeetingSettings
    created_at: datetime
    description: str | None = None
    is_active: bool = True
    ended_at: datetime | None = None

    def end(self, now: datetime) -> Meeting:
        return replace(self, is_active=False, ended_at=now)

    def with_settings(self, settings: MeetingSettings) -> Meeting:
        return replace(self, settings=settings)


@dataclass(frozen=True, eq=True)
class Participant:
    """A user's membership in a meeting.

    Attributes:
        meeting_id: Meeting joined.
        user_id: Member user.
        role: Role within the meeting.
        joined_at: When the user (last) joined.
        left_at: When the user left, None while active.
    """

    meeting_id: UUID
    user_id: UUID
    role: ParticipantRole
    joined_at: datetime
    left_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.left_at is None

    @property
    def is_facilitator(self) -> bool:
        return self.role == ParticipantRole.FACILITATOR and self.is_active

    def leave(self, now: datetime) -> Participant:
        return replace(self, left_at=now)

    def rejoin(self, now: datetime, role: ParticipantRole) -> Participant:
        return replace(self, role=role, joined_at=now, left_at=None)
