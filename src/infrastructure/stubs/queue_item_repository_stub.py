"""In-memory stub for QueueItemRepositoryProtocol.

This stub provides an in-memory implementation for testing and local
runs. It keeps items in insertion order so list queries return ties in
the order they were created, as a database ordered by insertion would.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.domain.models.queue_item import QueueItem, QueueItemStatus, QueueItemType


class QueueItemRepositoryStub:
    """In-memory stub implementation of QueueItemRepositoryProtocol.

    Thread-safety note: This stub is NOT thread-safe. Services serialize
    writes per meeting with KeyedLock.
    """

    def __init__(self) -> None:
        """Initialize empty stub."""
        # Key: item id. Dict preserves insertion order.
        self._items: dict[UUID, QueueItem] = {}

    async def save(self, item: QueueItem) -> None:
        if item.id in self._items:
            raise ValueError(f"Queue item {item.id} already exists")
        self._items[item.id] = item

    async def get(self, item_id: UUID) -> QueueItem | None:
        return self._items.get(item_id)

    async def update(self, item: QueueItem) -> None:
        if item.id not in self._items:
            raise KeyError(item.id)
        self._items[item.id] = item

    async def list_by_meeting_and_status(
        self,
        meeting_id: UUID,
        status: QueueItemStatus,
    ) -> list[QueueItem]:
        return [
            item
            for item in self._items.values()
            if item.meeting_id == meeting_id and item.status == status
        ]

    async def find_waiting_for_user(
        self,
        meeting_id: UUID,
        user_id: UUID,
    ) -> QueueItem | None:
        for item in self._items.values():
            if (
                item.meeting_id == meeting_id
                and item.user_id == user_id
                and item.status == QueueItemStatus.WAITING
            ):
                return item
        return None

    async def list_created_since(
        self,
        meeting_id: UUID,
        user_id: UUID,
        item_type: QueueItemType,
        since: datetime,
    ) -> list[QueueItem]:
        matching = [
            item
            for item in self._items.values()
            if item.meeting_id == meeting_id
            and item.user_id == user_id
            and item.type == item_type
            and item.created_at >= since
        ]
        return sorted(matching, key=lambda item: item.created_at)

    async def list_completed_since(
        self,
        meeting_id: UUID,
        since: datetime,
        limit: int,
    ) -> list[QueueItem]:
        completed = [
            item
            for item in self._items.values()
            if item.meeting_id == meeting_id
            and item.status == QueueItemStatus.DONE
            and item.completed_at is not None
            and item.completed_at >= since
        ]
        completed.sort(key=lambda item: item.completed_at, reverse=True)
        return completed[:limit]

    async def list_by_meeting(self, meeting_id: UUID) -> list[QueueItem]:
        items = [item for item in self._items.values() if item.meeting_id == meeting_id]
        return sorted(items, key=lambda item: item.created_at)

    def clear(self) -> None:
        """Clear all stored items (for testing)."""
        self._items.clear()
