"""Recent-speaker tracker.

Derives the set of users who spoke recently in a meeting: the distinct
users behind the most recent completed turns within a trailing window
(by default the last 5 turns within the last hour). The set is computed
from item history on every call and handed to the ordering engine as an
explicit argument.
"""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID

import structlog

from src.application.ports.queue_item_repository import QueueItemRepositoryProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.config.facilitation_config import (
    DEFAULT_FACILITATION_CONFIG,
    FacilitationConfig,
)

logger = structlog.get_logger(__name__)


class RecentSpeakerTracker:
    """Computes recent speakers from completed queue items.

    Attributes:
        _window: Trailing window for completed turns.
        _limit: Number of most recent turns considered.
    """

    def __init__(
        self,
        queue_repository: QueueItemRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        config: FacilitationConfig = DEFAULT_FACILITATION_CONFIG,
    ) -> None:
        """Initialize the tracker.

        Args:
            queue_repository: Source of completed queue items.
            time_authority: Clock for the trailing window.
            config: Supplies window length and turn limit.
        """
        self._queue_repository = queue_repository
        self._time = time_authority
        self._window = timedelta(minutes=config.recent_speaker_window_minutes)
        self._limit = config.recent_speaker_limit

    async def recent_speakers(self, meeting_id: UUID) -> frozenset[UUID]:
        """Return the users behind the most recent completed turns.

        Args:
            meeting_id: Meeting to inspect.

        Returns:
            Distinct user ids. Only membership matters to callers.
        """
        since = self._time.now() - self._window
        completed = await self._queue_repository.list_completed_since(
            meeting_id, since, self._limit
        )
        speakers = frozenset(item.user_id for item in completed)
        logger.debug(
            "recent_speakers_computed",
            meeting_id=str(meeting_id),
            completed_turns=len(completed),
            speaker_count=len(speakers),
        )
        return speakers
