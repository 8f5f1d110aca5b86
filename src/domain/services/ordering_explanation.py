"""Human-readable reasons for a queue item's position.

Reasons are built from the StackSignals the ordering engine sorts on and
never from anything else, so an explanation cannot contradict the order.
"""

from __future__ import annotations

from collections.abc import Set
from uuid import UUID

from src.domain.models.meeting import MeetingSettings
from src.domain.models.queue_item import QueueItem
from src.domain.services.stack_ordering import StackSignals, compute_stack_signals

FIFO_REASON = "First in, first out"
DIRECT_RESPONSE_REASON = "Direct response"
FRESH_VOICE_REASON = "Has not spoken recently"

POINT_REASONS: dict[int, str] = {
    3: "Point of process (highest priority)",
    2: "Point of information",
    1: "Point of clarification",
}

REASON_SEPARATOR = "; "


def describe_signals(signals: StackSignals) -> str:
    """Render ``signals`` as reasons in order of significance.

    Point type, then direct response, then invite tag match, then
    freshness. Falls back to FIFO when nothing applies.
    """
    reasons: list[str] = []

    point_reason = POINT_REASONS.get(signals.point_priority)
    if point_reason:
        reasons.append(point_reason)

    if signals.is_direct_response:
        reasons.append(DIRECT_RESPONSE_REASON)

    if signals.progressive_enabled:
        if signals.matched_tags:
            reasons.append(f"Invite tags: {', '.join(sorted(signals.matched_tags))}")
        if signals.fresh_voice:
            reasons.append(FRESH_VOICE_REASON)

    if not reasons:
        reasons.append(FIFO_REASON)

    return REASON_SEPARATOR.join(reasons)


def explain_position(
    item: QueueItem,
    recent_speaker_ids: Set[UUID],
    settings: MeetingSettings,
) -> str:
    """Explain why ``item`` sits where the ordering engine put it.

    Args:
        item: The queue item.
        recent_speaker_ids: The same recent speaker set passed to order_stack.
        settings: The same meeting settings passed to order_stack.

    Returns:
        Reasons joined with "; ", e.g.
        "Direct response; Invite tags: new_to_group; Has not spoken recently".
    """
    return describe_signals(compute_stack_signals(item, settings, recent_speaker_ids))
