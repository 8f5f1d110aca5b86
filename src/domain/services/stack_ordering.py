"""Stack ordering: who speaks next.

Computes a deterministic total order over waiting speaking requests.
The order is a pure function of the items, the meeting settings and the
set of recent speakers passed in by the caller. Nothing is remembered
between calls.

Sort key, most significant first:
    1. Point priority: process (3) > information (2) > clarification (1)
       > everything else (0)
    2. Direct responses ahead of regular hands
    3. Progressive stack priority (only when enabled):
       invite tag and fresh voice = 10, invite tag only = 5,
       fresh voice only = 2, neither = 0
    4. Creation time, oldest first. Python's sort is stable, so items
       with identical timestamps keep their input order.

The ordering explanation is derived from the same StackSignals record,
so the displayed reason always matches the computed position.
"""

from __future__ import annotations

from collections.abc import Iterable, Set
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from src.domain.models.meeting import MeetingSettings
from src.domain.models.queue_item import QueueItem, QueueItemStatus, QueueItemType

POINT_PRIORITY: dict[QueueItemType, int] = {
    QueueItemType.POINT_PROCESS: 3,
    QueueItemType.POINT_INFO: 2,
    QueueItemType.POINT_CLARIFICATION: 1,
}

# Progressive stack tiers. Fixed so any position can be audited by hand.
PROGRESSIVE_TAGGED_FRESH = 10
PROGRESSIVE_TAGGED = 5
PROGRESSIVE_FRESH = 2
PROGRESSIVE_NONE = 0


@dataclass(frozen=True, eq=True)
class StackSignals:
    """Every signal the ordering engine consults for one item.

    Attributes:
        point_priority: 3/2/1 for points, 0 for anything else.
        is_direct_response: True for DIRECT_RESPONSE items.
        progressive_enabled: Whether progressive stack applied.
        matched_tags: Item tags that are also meeting invite tags.
            Empty when progressive stack is off.
        fresh_voice: User is not a recent speaker. Always False when
            progressive stack is off.
        progressive_priority: Tier score, 0 when progressive stack is off.
    """

    point_priority: int
    is_direct_response: bool
    progressive_enabled: bool
    matched_tags: frozenset[str]
    fresh_voice: bool
    progressive_priority: int


def point_priority(item_type: QueueItemType | None) -> int:
    """Return the point priority for an item type (0 for unknown or None)."""
    if item_type is None:
        return 0
    return POINT_PRIORITY.get(item_type, 0)


def progressive_priority(has_tag: bool, fresh_voice: bool) -> int:
    """Return the progressive stack tier for the two boolean signals."""
    if has_tag and fresh_voice:
        return PROGRESSIVE_TAGGED_FRESH
    if has_tag:
        return PROGRESSIVE_TAGGED
    if fresh_voice:
        return PROGRESSIVE_FRESH
    return PROGRESSIVE_NONE


def compute_stack_signals(
    item: QueueItem,
    settings: MeetingSettings,
    recent_speaker_ids: Set[UUID],
) -> StackSignals:
    """Compute the ordering signals for a single item.

    Args:
        item: The queue item.
        settings: Meeting settings (progressive stack flag, invite tags).
        recent_speaker_ids: Users who spoke recently.

    Returns:
        StackSignals used both for sorting and for explanation.
    """
    if not settings.progressive_stack:
        return StackSignals(
            point_priority=point_priority(item.type),
            is_direct_response=item.type == QueueItemType.DIRECT_RESPONSE,
            progressive_enabled=False,
            matched_tags=frozenset(),
            fresh_voice=False,
            progressive_priority=PROGRESSIVE_NONE,
        )

    matched = frozenset(item.tags or ()) & frozenset(settings.invite_tags or ())
    fresh = item.user_id not in recent_speaker_ids
    return StackSignals(
        point_priority=point_priority(item.type),
        is_direct_response=item.type == QueueItemType.DIRECT_RESPONSE,
        progressive_enabled=True,
        matched_tags=matched,
        fresh_voice=fresh,
        progressive_priority=progressive_priority(bool(matched), fresh),
    )


def stack_sort_key(
    item: QueueItem,
    settings: MeetingSettings,
    recent_speaker_ids: Set[UUID],
) -> tuple[int, int, int, datetime]:
    """Return the ascending sort key for ``item``.

    Priorities are negated so that higher priorities sort first while
    creation time sorts oldest first.
    """
    signals = compute_stack_signals(item, settings, recent_speaker_ids)
    return (
        -signals.point_priority,
        -int(signals.is_direct_response),
        -signals.progressive_priority,
        item.created_at,
    )


def order_stack(
    items: Iterable[QueueItem],
    settings: MeetingSettings,
    recent_speaker_ids: Set[UUID] = frozenset(),
) -> list[QueueItem]:
    """Order waiting items by facilitation priority.

    Items that are not WAITING are dropped. Identical input always yields
    identical output.

    Args:
        items: Candidate queue items, in repository insertion order.
        settings: Meeting settings.
        recent_speaker_ids: Users who spoke recently.

    Returns:
        Waiting items, first speaker first.
    """
    waiting = [item for item in items if item.status == QueueItemStatus.WAITING]
    return sorted(
        waiting,
        key=lambda item: stack_sort_key(item, settings, recent_speaker_ids),
    )
