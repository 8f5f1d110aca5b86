"""Facilitation configuration.

Deployment-level knobs for the facilitation core, with environment
variable overrides. Per-meeting behaviour lives in MeetingSettings; the
values here are shared by every meeting.

Environment Variables:
- STACK_RECENT_SPEAKER_WINDOW_MINUTES: Lookback for recent speakers (default: 60)
- STACK_RECENT_SPEAKER_LIMIT: Completed turns considered recent (default: 5)
- STACK_DIRECT_RESPONSE_LOOKBACK_MINUTES: Rate limiter lookback (default: 10)
- STACK_PASS_THRESHOLD: Fraction of active participants whose support
  passes a proposal (default: 0.5)
- STACK_PIN_LENGTH: Length of generated meeting PINs (default: 6)
- STACK_PIN_ATTEMPTS: Attempts to find an unused PIN (default: 20)
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable, falling back to ``default``.

    Args:
        key: Environment variable name.
        default: Value used when unset or unparseable.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class FacilitationConfig:
    """Shared configuration for the facilitation core.

    Attributes:
        recent_speaker_window_minutes: Only turns completed within this many
            minutes count as recent. Default: 60.
        recent_speaker_limit: Only this many most recent completed turns are
            considered. Default: 5.
        direct_response_lookback_minutes: Window over which direct responses
            are counted against a user's quota. Default: 10.
        pass_threshold: Fraction of active participants whose AGREE or
            STAND_ASIDE votes pass a fully voted proposal. Default: 0.5.
        pin_length: Length of generated meeting PINs. Default: 6.
        pin_attempts: Attempts made to find an unused PIN. Default: 20.
    """

    recent_speaker_window_minutes: int = 60
    recent_speaker_limit: int = 5
    direct_response_lookback_minutes: int = 10
    pass_threshold: float = 0.5
    pin_length: int = 6
    pin_attempts: int = 20

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.recent_speaker_window_minutes < 1:
            raise ValueError(
                "recent_speaker_window_minutes must be positive, "
                f"got {self.recent_speaker_window_minutes}"
            )
        if self.recent_speaker_limit < 1:
            raise ValueError(
                f"recent_speaker_limit must be positive, got {self.recent_speaker_limit}"
            )
        if self.direct_response_lookback_minutes < 1:
            raise ValueError(
                "direct_response_lookback_minutes must be positive, "
                f"got {self.direct_response_lookback_minutes}"
            )
        if not 0.0 < self.pass_threshold <= 1.0:
            raise ValueError(
                f"pass_threshold must be in (0, 1], got {self.pass_threshold}"
            )
        if self.pin_length < 4:
            raise ValueError(f"pin_length must be at least 4, got {self.pin_length}")
        if self.pin_attempts < 1:
            raise ValueError(f"pin_attempts must be positive, got {self.pin_attempts}")

    @classmethod
    def from_environment(cls) -> "FacilitationConfig":
        """Create config from environment variables with defaults.

        Returns:
            FacilitationConfig with values from environment or defaults.
        """
        return cls(
            recent_speaker_window_minutes=_get_int_env(
                "STACK_RECENT_SPEAKER_WINDOW_MINUTES", 60
            ),
            recent_speaker_limit=_get_int_env("STACK_RECENT_SPEAKER_LIMIT", 5),
            direct_response_lookback_minutes=_get_int_env(
                "STACK_DIRECT_RESPONSE_LOOKBACK_MINUTES", 10
            ),
            pass_threshold=_get_float_env("STACK_PASS_THRESHOLD", 0.5),
            pin_length=_get_int_env("STACK_PIN_LENGTH", 6),
            pin_attempts=_get_int_env("STACK_PIN_ATTEMPTS", 20),
        )


# Default config with the documented facilitation constants
DEFAULT_FACILITATION_CONFIG = FacilitationConfig()

# Testing config: same rules, fewer PIN attempts so collisions surface quickly
TEST_FACILITATION_CONFIG = FacilitationConfig(pin_attempts=3)
