"""Per-key serialization for check-then-write sequences.

Queue operations serialize on the meeting id and consensus operations
on the proposal id. Within one process this rules out two concurrent
joins both seeing "no waiting item", two starts both seeing "no current
speaker", and two votes by the same user losing one update.

A key's lock lives only while some task holds or awaits it, so a
long-running process does not accumulate one lock per meeting ever seen.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class KeyedLock:
    """A lazily created ``asyncio.Lock`` per key.

    Example:
        >>> locks = KeyedLock()
        >>> async with locks.hold(meeting_id):
        ...     ...  # read, verify, write
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._holders: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        # Counts waiters as well as the owner
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._holders[key] - 1
            if remaining:
                self._holders[key] = remaining
            else:
                del self._holders[key]
                del self._locks[key]

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
