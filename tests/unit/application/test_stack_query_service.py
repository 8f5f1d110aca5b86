"""Unit tests for StackQueryService."""

from uuid import uuid4

import pytest

from src.application.services.queue_lifecycle_service import QueueLifecycleService
from src.application.services.stack_query_service import StackQueryService
from src.domain.errors import MeetingNotFoundError
from src.domain.models.meeting import MeetingSettings
from src.domain.models.queue_item import QueueItemType
from tests.helpers.factories import SeededMeeting, seed_meeting
from tests.helpers.fake_time_authority import FakeTimeAuthority

PROGRESSIVE = MeetingSettings(progressive_stack=True, invite_tags=frozenset({"new_to_group"}))


class TestGetOrderedQueue:
    """Tests for get_ordered_queue."""

    @pytest.mark.asyncio
    async def test_positions_and_reasons(
        self,
        lifecycle: QueueLifecycleService,
        stack_query: StackQueryService,
        seeded: SeededMeeting,
        fake_time: FakeTimeAuthority,
    ) -> None:
        alice = await lifecycle.join(seeded.id, seeded.alice, QueueItemType.HAND)
        fake_time.advance(seconds=1)
        bob = await lifecycle.join(seeded.id, seeded.bob, QueueItemType.HAND)
        fake_time.advance(seconds=1)
        charlie = await lifecycle.join(seeded.id, seeded.charlie, QueueItemType.DIRECT_RESPONSE)

        entries = await stack_query.get_ordered_queue(seeded.id)

        assert [(e.item.id, e.position, e.reason) for e in entries] == [
            (charlie.id, 1, "Direct response"),
            (alice.id, 2, "First in, first out"),
            (bob.id, 3, "First in, first out"),
        ]

    @pytest.mark.asyncio
    async def test_progressive_stack_uses_recent_speakers(
        self,
        lifecycle: QueueLifecycleService,
        stack_query: StackQueryService,
        meeting_repo,
        fake_time: FakeTimeAuthority,
    ) -> None:
        seeded = await seed_meeting(meeting_repo, settings=PROGRESSIVE)

        # Bob speaks once, so he is a recent speaker
        turn = await lifecycle.join(seeded.id, seeded.bob, QueueItemType.HAND)
        await lifecycle.start_speaking(turn.id, seeded.facilitator_id)
        fake_time.advance(seconds=120)
        await lifecycle.end_speaking(turn.id, seeded.facilitator_id)

        bob = await lifecycle.join(seeded.id, seeded.bob, QueueItemType.HAND)
        fake_time.advance(seconds=1)
        charlie = await lifecycle.join(seeded.id, seeded.charlie, QueueItemType.HAND)
        fake_time.advance(seconds=1)
        alice = await lifecycle.join(
            seeded.id, seeded.alice, QueueItemType.HAND, tags=["new_to_group"]
        )

        entries = await stack_query.get_ordered_queue(seeded.id)

        assert [(e.item.id, e.reason) for e in entries] == [
            (alice.id, "Invite tags: new_to_group; Has not spoken recently"),
            (charlie.id, "Has not spoken recently"),
            (bob.id, "First in, first out"),
        ]

    @pytest.mark.asyncio
    async def test_excludes_speaking_and_removed_items(
        self,
        lifecycle: QueueLifecycleService,
        stack_query: StackQueryService,
        seeded: SeededMeeting,
    ) -> None:
        speaking = await lifecycle.join(seeded.id, seeded.alice, QueueItemType.HAND)
        removed = await lifecycle.join(seeded.id, seeded.bob, QueueItemType.HAND)
        waiting = await lifecycle.join(seeded.id, seeded.charlie, QueueItemType.HAND)
        await lifecycle.start_speaking(speaking.id, seeded.facilitator_id)
        await lifecycle.remove(removed.id, seeded.bob)

        entries = await stack_query.get_ordered_queue(seeded.id)

        assert [e.item.id for e in entries] == [waiting.id]

    @pytest.mark.asyncio
    async def test_repeated_reads_are_identical(
        self,
        lifecycle: QueueLifecycleService,
        stack_query: StackQueryService,
        seeded: SeededMeeting,
    ) -> None:
        for user in (seeded.alice, seeded.bob, seeded.charlie):
            await lifecycle.join(seeded.id, user, QueueItemType.HAND)

        first = await stack_query.get_ordered_queue(seeded.id)

        assert await stack_query.get_ordered_queue(seeded.id) == first

    @pytest.mark.asyncio
    async def test_unknown_meeting(self, stack_query: StackQueryService) -> None:
        with pytest.raises(MeetingNotFoundError):
            await stack_query.get_ordered_queue(uuid4())


class TestGetCurrentSpeaker:
    @pytest.mark.asyncio
    async def test_none_when_nobody_speaks(
        self, stack_query: StackQueryService, seeded: SeededMeeting
    ) -> None:
        assert await stack_query.get_current_speaker(seeded.id) is None

    @pytest.mark.asyncio
    async def test_returns_speaking_item(
        self,
        lifecycle: QueueLifecycleService,
        stack_query: StackQueryService,
        seeded: SeededMeeting,
    ) -> None:
        item = await lifecycle.join(seeded.id, seeded.alice, QueueItemType.HAND)
        started = await lifecycle.start_speaking(item.id, seeded.facilitator_id)

        assert await stack_query.get_current_speaker(seeded.id) == started
