"""System clock adapter for TimeAuthorityProtocol."""

from __future__ import annotations

from datetime import datetime, timezone


class SystemTimeAuthority:
    """Reads the host clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
