"""Read side of the speaking stack.

Every read recomputes the order from scratch: load the waiting items,
derive recent speakers, order, then explain each position with the same
settings and recent-speaker set.
"""

from __future__ import annotations

from uuid import UUID

import structlog

from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.application.ports.queue_item_repository import QueueItemRepositoryProtocol
from src.application.services.recent_speaker_tracker import RecentSpeakerTracker
from src.domain.errors import MeetingNotFoundError
from src.domain.models.ordered_queue import OrderedQueueEntry
from src.domain.models.queue_item import QueueItem, QueueItemStatus
from src.domain.services.ordering_explanation import explain_position
from src.domain.services.stack_ordering import order_stack

logger = structlog.get_logger(__name__)


class StackQueryService:
    """Builds the ordered, explained view of a meeting's stack."""

    def __init__(
        self,
        queue_repository: QueueItemRepositoryProtocol,
        meeting_repository: MeetingRepositoryProtocol,
        recent_speaker_tracker: RecentSpeakerTracker,
    ) -> None:
        self._queue_repository = queue_repository
        self._meeting_repository = meeting_repository
        self._tracker = recent_speaker_tracker

    async def get_ordered_queue(self, meeting_id: UUID) -> list[OrderedQueueEntry]:
        """Return waiting items in speaking order with their reasons.

        Args:
            meeting_id: Meeting whose stack to read.

        Returns:
            Entries with 1-based positions, first speaker first.

        Raises:
            MeetingNotFoundError: Meeting does not exist.
        """
        meeting = await self._meeting_repository.get(meeting_id)
        if meeting is None:
            logger.warning("meeting_not_found", meeting_id=str(meeting_id))
            raise MeetingNotFoundError(meeting_id)

        waiting = await self._queue_repository.list_by_meeting_and_status(
            meeting_id, QueueItemStatus.WAITING
        )
        recent = await self._tracker.recent_speakers(meeting_id)
        ordered = order_stack(waiting, meeting.settings, recent)

        entries = [
            OrderedQueueEntry(
                item=item,
                position=position,
                reason=explain_position(item, recent, meeting.settings),
            )
            for position, item in enumerate(ordered, start=1)
        ]
        logger.debug(
            "ordered_queue_computed",
            meeting_id=str(meeting_id),
            waiting=len(entries),
            progressive_stack=meeting.settings.progressive_stack,
        )
        return entries

    async def get_current_speaker(self, meeting_id: UUID) -> QueueItem | None:
        """Return the SPEAKING item of the meeting, if any."""
        speaking = await self._queue_repository.list_by_meeting_and_status(
            meeting_id, QueueItemStatus.SPEAKING
        )
        return speaking[0] if speaking else None
