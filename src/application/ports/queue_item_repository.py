"""Queue item repository port.

Durable store of speaking requests. Implementations must return items
of one meeting in insertion order from every list method unless stated
otherwise; the ordering engine relies on that order for ties between
identical timestamps.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.models.queue_item import QueueItem, QueueItemStatus, QueueItemType


class QueueItemRepositoryProtocol(Protocol):
    """Protocol for queue item persistence."""

    async def save(self, item: QueueItem) -> None:
        """Store a new queue item.

        Raises:
            ValueError: If an item with the same id already exists.
        """
        ...

    async def get(self, item_id: UUID) -> QueueItem | None:
        """Return the item with ``item_id``, or None."""
        ...

    async def update(self, item: QueueItem) -> None:
        """Replace the stored item with the same id.

        Raises:
            KeyError: If the item does not exist.
        """
        ...

    async def list_by_meeting_and_status(
        self,
        meeting_id: UUID,
        status: QueueItemStatus,
    ) -> list[QueueItem]:
        """Return items of a meeting with ``status``, in insertion order."""
        ...

    async def find_waiting_for_user(
        self,
        meeting_id: UUID,
        user_id: UUID,
    ) -> QueueItem | None:
        """Return the user's WAITING item in the meeting, if any."""
        ...

    async def list_created_since(
        self,
        meeting_id: UUID,
        user_id: UUID,
        item_type: QueueItemType,
        since: datetime,
    ) -> list[QueueItem]:
        """Return items of ``item_type`` the user created at or after ``since``.

        Items of every status are included, oldest first.
        """
        ...

    async def list_completed_since(
        self,
        meeting_id: UUID,
        since: datetime,
        limit: int,
    ) -> list[QueueItem]:
        """Return up to ``limit`` DONE items completed at or after ``since``.

        Ordered by completed_at, most recent first.
        """
        ...

    async def list_by_meeting(self, meeting_id: UUID) -> list[QueueItem]:
        """Return every item of a meeting ordered by created_at."""
        ...
