"""In-memory TTL store (development and tests).

Notes:
- Per-process only: running multiple workers gives each worker its own
  cooldown records, so a client could play once per worker.
- Thread-safe: uses a lock around shared state. The lock is never held
  across an await.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.ttl_store.base import (
    AbstractTTLStore,
    StoreOk,
    StoreResult,
    validate_ttl_ms,
)

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: str
    expires_at: float


class InMemoryTTLStore(AbstractTTLStore):
    """Dict-backed store that honours millisecond expiries.

    Expired entries are dropped lazily on read and swept on every write, so the
    store never grows past the number of live keys plus one write's worth.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the store.

        Args:
            clock: Time source returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def get(self, key: str) -> StoreResult[str | None]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return StoreOk(None)
            if entry.expires_at <= now:
                self._entries.pop(key, None)
                return StoreOk(None)
            return StoreOk(entry.value)

    async def set_with_expiry(self, key: str, value: str, ttl_ms: int) -> StoreResult[None]:
        validate_ttl_ms(ttl_ms)
        now = self._clock()
        with self._lock:
            self._evict_expired_locked(now)
            self._entries[key] = _Entry(value=value, expires_at=now + ttl_ms / 1000)

        logger.debug("store.set", extra={"backend": "memory", "ttl_ms": ttl_ms})
        return StoreOk(None)

    async def ping(self) -> StoreResult[bool]:
        return StoreOk(True)

    def _evict_expired_locked(self, now: float) -> None:
        expired = [k for k, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            self._entries.pop(key, None)
