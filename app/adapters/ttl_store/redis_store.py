"""Redis-backed TTL store.

One ``redis.asyncio`` client (and its connection pool) is shared by every
request in the process. Socket timeouts configured on the client are the only
bound on how long a store call can hang; when they trip, the call returns a
``StoreFailure`` like any other connectivity error.
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from app.adapters.ttl_store.base import (
    AbstractTTLStore,
    StoreFailure,
    StoreOk,
    StoreResult,
    validate_ttl_ms,
)

logger = logging.getLogger(__name__)


def _failure(operation: str, exc: BaseException) -> StoreFailure:
    if isinstance(exc, UnicodeDecodeError):
        reason = "invalid_value"
    elif isinstance(exc, (RedisTimeoutError, TimeoutError)):
        reason = "timeout"
    else:
        reason = "unavailable"
    logger.warning(
        f"store.{operation}_failed",
        extra={
            "backend": "redis",
            "reason": reason,
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
        },
    )
    return StoreFailure(reason=reason, error=exc)


class RedisTTLStore(AbstractTTLStore):
    """TTL store on top of a shared async Redis client."""

    def __init__(self, client: aioredis.Redis) -> None:
        """Wrap an existing client.

        Args:
            client: Async Redis client created with ``decode_responses=True``.
        """
        self._client = client

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        socket_timeout: float | None = None,
        connect_timeout: float | None = None,
    ) -> "RedisTTLStore":
        """Create a store with its own client.

        Creating the client does not open a connection; the first command does.

        Args:
            url: Redis connection URL.
            socket_timeout: Per-command timeout in seconds.
            connect_timeout: Connection timeout in seconds.
        """
        client = aioredis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=connect_timeout,
        )
        return cls(client)

    async def get(self, key: str) -> StoreResult[str | None]:
        try:
            value = await self._client.get(key)
        except (RedisError, OSError, UnicodeDecodeError) as exc:
            # decode_responses=True decodes inside the client; non-UTF-8 values land here
            return _failure("get", exc)
        return StoreOk(value)

    async def set_with_expiry(self, key: str, value: str, ttl_ms: int) -> StoreResult[None]:
        validate_ttl_ms(ttl_ms)
        try:
            # SET ... PX overwrites the value and restarts the expiry in one command
            await self._client.set(key, value, px=ttl_ms)
        except (RedisError, OSError) as exc:
            return _failure("set", exc)
        return StoreOk(None)

    async def ping(self) -> StoreResult[bool]:
        try:
            pong = await self._client.ping()
        except (RedisError, OSError) as exc:
            return _failure("ping", exc)
        return StoreOk(bool(pong))

    async def close(self) -> None:
        await self._client.aclose()
