"""Tests for FakeTimeAuthority test helper.

These tests validate the FakeTimeAuthority class itself to ensure
it provides reliable, deterministic time control for other tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from tests.helpers.fake_time_authority import DEFAULT_FAKE_TIME, FakeTimeAuthority


class TestControllableTime:
    """now() returns the controlled time value."""

    def test_defaults_to_fixed_time(self) -> None:
        assert FakeTimeAuthority().now() == DEFAULT_FAKE_TIME

    def test_now_returns_controlled_time(self) -> None:
        frozen_at = datetime(2026, 1, 15, 10, 30, 0, tzinfo=timezone.utc)
        fake_time = FakeTimeAuthority(frozen_at=frozen_at)

        assert fake_time.now() == frozen_at

    def test_naive_datetime_taken_as_utc(self) -> None:
        fake_time = FakeTimeAuthority(frozen_at=datetime(2026, 1, 15, 10, 30, 0))

        assert fake_time.now().tzinfo == timezone.utc

    def test_time_does_not_advance_on_its_own(self) -> None:
        fake_time = FakeTimeAuthority()

        assert fake_time.now() == fake_time.now()


class TestAdvance:
    """advance() moves time forward only."""

    def test_advance_seconds(self) -> None:
        fake_time = FakeTimeAuthority()

        fake_time.advance(seconds=90)

        assert fake_time.now() == DEFAULT_FAKE_TIME + timedelta(seconds=90)

    def test_advance_delta_takes_precedence(self) -> None:
        fake_time = FakeTimeAuthority()

        fake_time.advance(seconds=5, delta=timedelta(minutes=10))

        assert fake_time.now() == DEFAULT_FAKE_TIME + timedelta(minutes=10)

    def test_advance_requires_amount(self) -> None:
        with pytest.raises(ValueError, match="Must provide"):
            FakeTimeAuthority().advance()

    def test_cannot_go_backwards(self) -> None:
        with pytest.raises(ValueError, match="backwards"):
            FakeTimeAuthority().advance(seconds=-1)

    def test_set_time(self) -> None:
        fake_time = FakeTimeAuthority()
        target = datetime(2025, 6, 1, tzinfo=timezone.utc)

        fake_time.set_time(target)

        assert fake_time.now() == target
