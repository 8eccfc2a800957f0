"""Factory for the cooldown TTL store."""

from __future__ import annotations

from app.adapters.ttl_store.base import AbstractTTLStore
from app.adapters.ttl_store.in_memory import InMemoryTTLStore
from app.adapters.ttl_store.redis_store import RedisTTLStore
from app.core.config import Settings, settings as default_settings
from app.core.errors import ConfigurationAppError


def create_ttl_store(cfg: Settings | None = None) -> AbstractTTLStore:
    """Instantiate the store backend selected by configuration.

    Called once at application startup. Any error raised here aborts startup.

    Args:
        cfg: Settings to read; defaults to the global settings.

    Returns:
        AbstractTTLStore: Configured store instance.

    Raises:
        ConfigurationAppError: If the backend is unknown or the Redis URL is
            missing.
    """
    cfg = cfg or default_settings
    backend = cfg.app.store_backend.strip().lower()

    if backend == "redis":
        url = (cfg.redis.url or "").strip()
        if not url:
            raise ConfigurationAppError(
                code="store_missing_url",
                message="Redis store requires the REDIS_URL environment variable",
                details={"setting": "REDIS_URL", "backend": backend},
            )
        return RedisTTLStore.from_url(
            url,
            socket_timeout=cfg.redis.socket_timeout_seconds,
            connect_timeout=cfg.redis.connect_timeout_seconds,
        )

    if backend == "memory":
        return InMemoryTTLStore()

    raise ConfigurationAppError(
        code="store_unknown_backend",
        message=f"Unknown store backend: '{backend}'. Supported backends: redis, memory",
        details={"setting": "APP_STORE_BACKEND", "backend": backend},
    )
