"""Queue lifecycle service.

Owns every write to a meeting's speaking stack: joining, removal,
starting and ending speakers, and advisory reorder annotations.

Guarantees:
- At most one WAITING item per (meeting, user)
- At most one SPEAKING item per meeting
- Every check runs before the first write, so a rejected operation
  leaves the stack untouched
- Operations on one meeting are serialized on the meeting id
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID, uuid4

import structlog

from src.application.ports.facilitation_metrics import FacilitationMetricsProtocol
from src.application.ports.meeting_repository import MeetingRepositoryProtocol
from src.application.ports.queue_item_repository import QueueItemRepositoryProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.services.direct_response_rate_limiter import (
    DirectResponseRateLimiter,
)
from src.application.services.keyed_lock import KeyedLock
from src.domain.errors import (
    AlreadyInQueueError,
    DirectResponseLimitExceededError,
    FacilitatorRequiredError,
    InvalidQueueItemTypeError,
    InvalidQueueTransitionError,
    InvalidReorderPositionError,
    MeetingInactiveError,
    MeetingNotFoundError,
    NotItemOwnerError,
    QueueItemNotFoundError,
)
from src.domain.models.meeting import Meeting, normalize_tags
from src.domain.models.queue_item import (
    AuditEntry,
    AuditEntryKind,
    QueueItem,
    QueueItemStatus,
    QueueItemType,
)

logger = structlog.get_logger(__name__)


def parse_queue_item_type(value: QueueItemType | str | None) -> QueueItemType:
    """Coerce a requested item type, rejecting missing or unknown values.

    Raises:
        InvalidQueueItemTypeError: If ``value`` is not a QueueItemType name.
    """
    if isinstance(value, QueueItemType):
        return value
    if isinstance(value, str):
        try:
            return QueueItemType(value)
        except ValueError:
            pass
    raise InvalidQueueItemTypeError(value)


class QueueLifecycleService:
    """Applies lifecycle transitions to queue items.

    Example:
        >>> service = QueueLifecycleService(
        ...     queue_repository=queue_repo,
        ...     meeting_repository=meeting_repo,
        ...     rate_limiter=rate_limiter,
        ...     time_authority=time_authority,
        ... )
        >>> item = await service.join(meeting_id, user_id, "HAND")
        >>> await service.start_speaking(item.id, facilitator_id)
    """

    def __init__(
        self,
        queue_repository: QueueItemRepositoryProtocol,
        meeting_repository: MeetingRepositoryProtocol,
        rate_limiter: DirectResponseRateLimiter,
        time_authority: TimeAuthorityProtocol,
        locks: KeyedLock | None = None,
        metrics: FacilitationMetricsProtocol | None = None,
    ) -> None:
        """Initialize the lifecycle service.

        Args:
            queue_repository: Store of queue items.
            meeting_repository: Source of meetings and participant roles.
            rate_limiter: Direct-response quota check.
            time_authority: Clock for every timestamp written.
            locks: Per-meeting locks. Share one instance between services
                that write the same meetings.
            metrics: Optional metrics recorder. Skipped when None.
        """
        self._queue_repository = queue_repository
        self._meeting_repository = meeting_repository
        self._rate_limiter = rate_limiter
        self._time = time_authority
        self._locks = locks or KeyedLock()
        self._metrics = metrics

    async def join(
        self,
        meeting_id: UUID,
        user_id: UUID,
        item_type: QueueItemType | str | None,
        tags: Iterable[str] | None = None,
    ) -> QueueItem:
        """Put a new speaking request on the stack.

        Args:
            meeting_id: Meeting to join.
            user_id: User raising the request.
            item_type: A QueueItemType or its name.
            tags: Self-identified tags for progressive stack matching.

        Returns:
            The created WAITING item.

        Raises:
            MeetingNotFoundError: Meeting does not exist.
            MeetingInactiveError: Meeting has ended.
            InvalidQueueItemTypeError: Type missing or unknown.
            AlreadyInQueueError: User already has a WAITING item.
            DirectResponseLimitExceededError: Direct-response quota used up.
        """
        log = logger.bind(meeting_id=str(meeting_id), user_id=str(user_id))

        async with self._locks.hold(meeting_id):
            meeting = await self._load_active_meeting(meeting_id, log)

            try:
                resolved_type = parse_queue_item_type(item_type)
            except InvalidQueueItemTypeError:
                log.warning("queue_join_rejected", reason="invalid_type", item_type=item_type)
                raise

            existing = await self._queue_repository.find_waiting_for_user(
                meeting_id, user_id
            )
            if existing is not None:
                log.warning(
                    "queue_join_rejected",
                    reason="already_waiting",
                    existing_item_id=str(existing.id),
                )
                raise AlreadyInQueueError(meeting_id, user_id, existing.id)

            if resolved_type == QueueItemType.DIRECT_RESPONSE:
                quota = await self._rate_limiter.get_quota(
                    meeting_id, user_id, meeting.settings
                )
                if not quota.allowed:
                    log.warning(
                        "queue_join_rejected",
                        reason="direct_response_limit",
                        current_count=quota.current_count,
                        limit=quota.limit,
                    )
                    raise DirectResponseLimitExceededError(
                        meeting_id=meeting_id,
                        user_id=user_id,
                        current_count=quota.current_count,
                        limit=quota.limit,
                        retry_at=quota.retry_at,
                    )

            item = QueueItem(
                id=uuid4(),
                meeting_id=meeting_id,
                user_id=user_id,
                type=resolved_type,
                status=QueueItemStatus.WAITING,
                created_at=self._time.now(),
                tags=normalize_tags(tags),
            )
            await self._queue_repository.save(item)

        if self._metrics is not None:
            self._metrics.record_queue_join(resolved_type)
        log.info("queue_item_joined", item_id=str(item.id), item_type=resolved_type.value)
        return item

    async def remove(
        self,
        item_id: UUID,
        requesting_user_id: UUID,
        reason: str | None = None,
    ) -> QueueItem:
        """Withdraw a WAITING item, marking it SKIPPED.

        The owner may remove their own item; a facilitator may remove anyone's.

        Raises:
            QueueItemNotFoundError: Item does not exist.
            NotItemOwnerError: Requester is neither owner nor facilitator.
            InvalidQueueTransitionError: Item is not WAITING.
        """
        log = logger.bind(item_id=str(item_id), requesting_user_id=str(requesting_user_id))
        meeting_id = await self._meeting_id_for(item_id, log)

        async with self._locks.hold(meeting_id):
            item = await self._load_item(item_id, log)

            if item.user_id != requesting_user_id and not await self._is_facilitator(
                item.meeting_id, requesting_user_id
            ):
                log.warning("queue_remove_rejected", reason="not_owner")
                raise NotItemOwnerError(item_id, requesting_user_id)

            self._require_status(item, QueueItemStatus.WAITING, "remove", log)

            entry = AuditEntry(
                kind=AuditEntryKind.REMOVAL,
                actor_id=requesting_user_id,
                recorded_at=self._time.now(),
                reason=reason,
            )
            removed = item.skip(entry)
            await self._queue_repository.update(removed)

        log.info(
            "queue_item_removed",
            meeting_id=str(meeting_id),
            by_owner=item.user_id == requesting_user_id,
        )
        return removed

    async def start_speaking(self, item_id: UUID, facilitator_id: UUID) -> QueueItem:
        """Make a WAITING item the current speaker.

        Any item already SPEAKING in the meeting is completed first, so the
        meeting never has two speakers.

        Raises:
            QueueItemNotFoundError: Item does not exist.
            FacilitatorRequiredError: Caller is not a facilitator.
            InvalidQueueTransitionError: Item is not WAITING.
        """
        log = logger.bind(item_id=str(item_id), facilitator_id=str(facilitator_id))
        meeting_id = await self._meeting_id_for(item_id, log)

        async with self._locks.hold(meeting_id):
            item = await self._load_item(item_id, log)
            await self._require_facilitator(meeting_id, facilitator_id, "start speaker", log)
            self._require_status(item, QueueItemStatus.WAITING, "start speaking", log)

            now = self._time.now()

            # Step 1: complete every current speaker
            speaking = await self._queue_repository.list_by_meeting_and_status(
                meeting_id, QueueItemStatus.SPEAKING
            )
            for previous in speaking:
                await self._queue_repository.update(previous.complete(now))
                log.info("speaker_completed", previous_item_id=str(previous.id))

            # Step 2: promote the target
            started = item.start(now)
            await self._queue_repository.update(started)

        if self._metrics is not None:
            self._metrics.record_speaker_turn()
        log.info(
            "speaker_started",
            meeting_id=str(meeting_id),
            user_id=str(item.user_id),
            replaced_speakers=len(speaking),
        )
        return started

    async def end_speaking(self, item_id: UUID, facilitator_id: UUID) -> QueueItem:
        """Complete the current speaker's turn.

        Raises:
            QueueItemNotFoundError: Item does not exist.
            FacilitatorRequiredError: Caller is not a facilitator.
            InvalidQueueTransitionError: Item is not SPEAKING.
        """
        log = logger.bind(item_id=str(item_id), facilitator_id=str(facilitator_id))
        meeting_id = await self._meeting_id_for(item_id, log)

        async with self._locks.hold(meeting_id):
            item = await self._load_item(item_id, log)
            await self._require_facilitator(meeting_id, facilitator_id, "end speaker", log)
            self._require_status(item, QueueItemStatus.SPEAKING, "end speaking", log)

            completed = item.complete(self._time.now())
            await self._queue_repository.update(completed)

        log.info("speaker_ended", meeting_id=str(meeting_id), user_id=str(item.user_id))
        return completed

    async def reorder(
        self,
        item_id: UUID,
        facilitator_id: UUID,
        new_position: int,
        reason: str | None = None,
    ) -> QueueItem:
        """Record a facilitator's requested position for a WAITING item.

        The annotation is advisory. Stack ordering does not read it, so the
        computed position is unchanged.

        Raises:
            QueueItemNotFoundError: Item does not exist.
            FacilitatorRequiredError: Caller is not a facilitator.
            InvalidQueueTransitionError: Item is not WAITING.
            InvalidReorderPositionError: ``new_position`` is below 1.
        """
        log = logger.bind(item_id=str(item_id), facilitator_id=str(facilitator_id))
        meeting_id = await self._meeting_id_for(item_id, log)

        async with self._locks.hold(meeting_id):
            item = await self._load_item(item_id, log)
            await self._require_facilitator(meeting_id, facilitator_id, "reorder", log)
            self._require_status(item, QueueItemStatus.WAITING, "reorder", log)

            if new_position < 1:
                log.warning("queue_reorder_rejected", reason="invalid_position", position=new_position)
                raise InvalidReorderPositionError(new_position)

            entry = AuditEntry(
                kind=AuditEntryKind.REORDER,
                actor_id=facilitator_id,
                recorded_at=self._time.now(),
                reason=reason,
                requested_position=new_position,
            )
            annotated = item.annotate(entry)
            await self._queue_repository.update(annotated)

        log.info("queue_item_reorder_requested", requested_position=new_position)
        return annotated

    async def _load_active_meeting(self, meeting_id: UUID, log) -> Meeting:
        meeting = await self._meeting_repository.get(meeting_id)
        if meeting is None:
            log.warning("meeting_not_found")
            raise MeetingNotFoundError(meeting_id)
        if not meeting.is_active:
            log.warning("meeting_inactive")
            raise MeetingInactiveError(meeting_id)
        return meeting

    async def _meeting_id_for(self, item_id: UUID, log) -> UUID:
        # The lock key needs the meeting id; the item is re-read under the lock.
        item = await self._load_item(item_id, log)
        return item.meeting_id

    async def _load_item(self, item_id: UUID, log) -> QueueItem:
        item = await self._queue_repository.get(item_id)
        if item is None:
            log.warning("queue_item_not_found")
            raise QueueItemNotFoundError(item_id)
        return item

    async def _is_facilitator(self, meeting_id: UUID, user_id: UUID) -> bool:
        participant = await self._meeting_repository.get_participant(meeting_id, user_id)
        return participant is not None and participant.is_facilitator

    async def _require_facilitator(
        self,
        meeting_id: UUID,
        user_id: UUID,
        operation: str,
        log,
    ) -> None:
        if not await self._is_facilitator(meeting_id, user_id):
            log.warning("facilitator_required", operation=operation)
            raise FacilitatorRequiredError(meeting_id, user_id, operation)

    @staticmethod
    def _require_status(
        item: QueueItem,
        required: QueueItemStatus,
        operation: str,
        log,
    ) -> None:
        if item.status != required:
            log.warning(
                "queue_transition_rejected",
                operation=operation,
                current_status=item.status.value,
                required_status=required.value,
            )
            raise InvalidQueueTransitionError(item.id, item.status, required, operation)
