"""Direct-response rate limiter.

A direct response jumps ahead of regular hands, so each user may only
raise a limited number of them. The count is a derived query over the
user's DIRECT_RESPONSE items created in the trailing lookback window
(10 minutes by default), whatever their status. There is no separate
counter to drift out of step with item history.

The lookback is independent of MeetingSettings.direct_response_window_sec,
which is a caller-facing cooldown this component does not enforce.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

import structlog

from src.application.ports.queue_item_repository import QueueItemRepositoryProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.config.facilitation_config import (
    DEFAULT_FACILITATION_CONFIG,
    FacilitationConfig,
)
from src.domain.models.meeting import MeetingSettings
from src.domain.models.queue_item import QueueItemType

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DirectResponseQuota:
    """A user's direct-response usage within the lookback window.

    Attributes:
        current_count: Direct responses created within the window.
        limit: Maximum allowed within the window.
        window_start: Oldest creation time that still counts.
        retry_at: When the oldest counted item leaves the window. None when
            nothing is counted.
    """

    current_count: int
    limit: int
    window_start: datetime
    retry_at: datetime | None = None

    @property
    def allowed(self) -> bool:
        return self.current_count < self.limit

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.current_count)


class DirectResponseRateLimiter:
    """Enforces the per-user direct-response quota of a meeting."""

    def __init__(
        self,
        queue_repository: QueueItemRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        config: FacilitationConfig = DEFAULT_FACILITATION_CONFIG,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            queue_repository: Source of the user's queue item history.
            time_authority: Clock for the lookback window.
            config: Supplies the lookback length.
        """
        self._queue_repository = queue_repository
        self._time = time_authority
        self._lookback = timedelta(minutes=config.direct_response_lookback_minutes)

    async def get_quota(
        self,
        meeting_id: UUID,
        user_id: UUID,
        settings: MeetingSettings,
    ) -> DirectResponseQuota:
        """Compute the user's current direct-response usage.

        Args:
            meeting_id: Meeting the user is in.
            user_id: User requesting a direct response.
            settings: Meeting settings supplying the per-user limit.

        Returns:
            DirectResponseQuota with count, limit and retry time.
        """
        window_start = self._time.now() - self._lookback
        recent = await self._queue_repository.list_created_since(
            meeting_id, user_id, QueueItemType.DIRECT_RESPONSE, window_start
        )
        retry_at = recent[0].created_at + self._lookback if recent else None
        return DirectResponseQuota(
            current_count=len(recent),
            limit=settings.max_direct_responses_per_user,
            window_start=window_start,
            retry_at=retry_at,
        )

    async def can_request_direct_response(
        self,
        meeting_id: UUID,
        user_id: UUID,
        settings: MeetingSettings,
    ) -> bool:
        """Return False once the user's count reaches the meeting limit."""
        quota = await self.get_quota(meeting_id, user_id, settings)
        if not quota.allowed:
            logger.info(
                "direct_response_quota_exhausted",
                meeting_id=str(meeting_id),
                user_id=str(user_id),
                current_count=quota.current_count,
                limit=quota.limit,
            )
        return quota.allowed
