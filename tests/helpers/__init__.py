"""Test helpers for Stack Keeper tests.

This package contains reusable test utilities and fake implementations
for dependency injection in unit tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    factories: make_* builders for domain records

Usage:
    from tests.helpers import FakeTimeAuthority
    from tests.helpers.factories import make_queue_item
"""

from tests.helpers.fake_time_authority import FakeTimeAuthority

__all__ = ["FakeTimeAuthority"]
