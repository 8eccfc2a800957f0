"""Play cooldown dependencies for FastAPI routes.

This module wires the cooldown limiter into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on dependency functions only.
- Explicit lifecycle: the store and limiter are built in the app lifespan and
  read from ``app.state``, never from module globals.

Client identity:
- The peer address of the connection (``request.client.host``).
- Behind a trusted proxy (APP_TRUST_FORWARDED_FOR=true), the first
  X-Forwarded-For entry instead.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from app.adapters.ttl_store.base import AbstractTTLStore
from app.core.config import settings
from app.services.cooldown_limiter import CooldownLimiter

UNKNOWN_CLIENT = "unknown"


def get_ttl_store(request: Request) -> AbstractTTLStore:
    """Return the process-wide store handle created at startup."""

    return request.app.state.ttl_store


def get_cooldown_limiter(request: Request) -> CooldownLimiter:
    """Return the process-wide cooldown limiter created at startup."""

    return request.app.state.cooldown_limiter


def get_client_id(request: Request) -> str:
    """Resolve the client identifier for the current request.

    Args:
        request: FastAPI request.

    Returns:
        str: Client IP address, or ``"unknown"`` if none is available.
    """

    if settings.app.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


async def enforce_play_cooldown(
    client_id: Annotated[str, Depends(get_client_id)],
    limiter: Annotated[CooldownLimiter, Depends(get_cooldown_limiter)],
) -> None:
    """FastAPI dependency that admits one play per cooldown window.

    Records the play when allowed. When refused, raises HTTP 429 with a
    Retry-After header (if enabled) carrying the remaining wait.

    Raises:
        HTTPException: 429 Too Many Requests while the cooldown is active, or
            when the play could not be recorded.
    """

    if await limiter.validate(client_id):
        return

    retry_after = await limiter.time_until_next_play(client_id)

    headers: dict[str, str] = {}
    if settings.app.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Play cooldown active. Try again later.",
        headers=headers or None,
    )
