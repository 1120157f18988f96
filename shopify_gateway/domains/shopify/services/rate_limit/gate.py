"""
Mutual-exclusion gate around admission decisions
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict


class MutualExclusionGate:
    """
    Serializes admission critical sections.

    One gate exists per controller type. Each shop gets its own lock inside
    the gate, so two callers for the same shop never both read "under the
    ceiling", while a shop that is waiting out its limit does not hold up
    any other shop. Only bookkeeping (and the admission wait) runs under the
    lock; the HTTP request itself is sent after release.
    """

    def __init__(self, name: str):
        self.name = name
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, shop: str) -> asyncio.Lock:
        lock = self._locks.get(shop)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[shop] = lock
        return lock

    @asynccontextmanager
    async def hold(self, shop: str) -> AsyncIterator[None]:
        """Run the enclosed block exclusively for ``shop``; released on every exit path"""
        async with self._lock_for(shop):
            yield

    def locked(self, shop: str) -> bool:
        lock = self._locks.get(shop)
        return lock is not None and lock.locked()
