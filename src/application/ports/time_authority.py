"""Time authority port - single source of timestamps.

Services that stamp records (created_at, started_at, completed_at,
decided_at) or compute trailing windows inject a TimeAuthorityProtocol
instead of calling ``datetime.now()`` directly. Tests inject a fake
clock and move it forward explicitly.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TimeAuthorityProtocol(Protocol):
    """Provides the current time."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...
