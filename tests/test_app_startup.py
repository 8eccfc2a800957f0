"""Tests for application startup and shutdown wiring."""

import pytest

from app.adapters.ttl_store.in_memory import InMemoryTTLStore
from app.core.app_factory import create_app
from app.core.config import settings
from app.core.errors import ConfigurationAppError
from app.services.cooldown_limiter import CooldownLimiter


@pytest.mark.asyncio
async def test_missing_redis_url_aborts_startup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings.app, "store_backend", "redis")
    monkeypatch.setattr(settings.redis, "url", None)
    app = create_app()

    with pytest.raises(ConfigurationAppError) as exc_info:
        async with app.router.lifespan_context(app):
            pass

    assert exc_info.value.code == "store_missing_url"


@pytest.mark.asyncio
async def test_configured_backend_is_built_at_startup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings.app, "store_backend", "memory")
    app = create_app()

    async with app.router.lifespan_context(app):
        assert isinstance(app.state.ttl_store, InMemoryTTLStore)
        assert isinstance(app.state.cooldown_limiter, CooldownLimiter)


def test_openapi_documents_cooldown_response() -> None:
    schema = create_app(store=InMemoryTTLStore()).openapi()

    responses = schema["paths"]["/v1/play"]["post"]["responses"]
    assert "429" in responses
    assert "Retry-After" in responses["429"]["headers"]
    assert {t["name"] for t in schema["tags"]} >= {"Play", "Health"}
