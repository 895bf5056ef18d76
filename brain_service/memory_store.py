# brain_service/memory_store.py
"""
MemoryStore

In-process conversation memory keyed by session key (wallet address or the
anonymous sentinel).

- Each session keeps at most `max_entries` exchanges; oldest go first.
- At most `max_sessions` distinct sessions are kept; the least recently used
  one is evicted when a new session would exceed the cap.
- `turn(key)` serializes a whole read -> upstream call -> write turn for one
  key. A key keeps its lock only while turns for it are running or queued.

Not shared between processes and not persistent across restarts.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List

from .session_context import Exchange

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    In-memory dictionary-based conversation store.

    Not persistent across deployments.
    """

    def __init__(self, max_entries: int = 20, max_sessions: int = 1000) -> None:
        self._store: "OrderedDict[str, List[Exchange]]" = OrderedDict()
        self._locks: Dict[str, asyncio.Lock] = {}
        self._active: Dict[str, int] = {}
        self.max_entries = max_entries
        self.max_sessions = max_sessions

    def __contains__(self, session_key: str) -> bool:
        return session_key in self._store

    @property
    def session_count(self) -> int:
        return len(self._store)

    def in_flight(self, session_key: str) -> bool:
        """True while a turn for this key is running or waiting for its lock."""
        return self._active.get(session_key, 0) > 0

    @asynccontextmanager
    async def turn(self, session_key: str) -> AsyncIterator[None]:
        lock = self._locks.get(session_key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_key] = lock
        self._active[session_key] = self._active.get(session_key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._active[session_key] - 1
            if remaining:
                self._active[session_key] = remaining
            else:
                del self._active[session_key]
                self._locks.pop(session_key, None)

    def get(self, session_key: str) -> List[Exchange]:
        """
        Return a copy of the session's history, oldest first.
        Unknown keys yield an empty list.
        """
        history = self._store.get(session_key)
        if history is None:
            return []
        self._store.move_to_end(session_key)
        return list(history)

    def append(
        self,
        session_key: str,
        user_exchange: Exchange,
        assistant_exchange: Exchange,
    ) -> None:
        """
        Record one round trip, then trim to the last `max_entries` entries.
        """
        history = self._store.get(session_key, [])
        history.extend((user_exchange, assistant_exchange))
        if len(history) > self.max_entries:
            history = history[-self.max_entries:]

        self._store[session_key] = history
        self._store.move_to_end(session_key)
        self._evict(keep=session_key)

    def _evict(self, keep: str) -> None:
        overflow = len(self._store) - self.max_sessions
        if overflow <= 0:
            return

        for key in list(self._store.keys()):
            if overflow <= 0:
                break
            if key == keep:
                continue
            if self.in_flight(key):
                continue
            self._store.pop(key, None)
            overflow -= 1
            logger.debug("Evicted session %s", key)
