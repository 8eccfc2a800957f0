"""HTTP tests for the play endpoints."""

from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.adapters.ttl_store.base import AbstractTTLStore, StoreFailure, StoreOk
from app.adapters.ttl_store.in_memory import InMemoryTTLStore
from app.core.app_factory import create_app
from app.core.config import settings


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(create_app(store=InMemoryTTLStore())) as test_client:
        yield test_client


def _client_with_store(store: AbstractTTLStore) -> TestClient:
    return TestClient(create_app(store=store))


class TestPlayStatus:
    def test_new_client_can_play(self, client: TestClient) -> None:
        response = client.get("/v1/play/status")

        assert response.status_code == 200
        assert response.json() == {"can_play": True, "seconds_until_next_play": 0}

    def test_status_does_not_consume_play(self, client: TestClient) -> None:
        client.get("/v1/play/status")
        client.get("/v1/play/status")

        assert client.post("/v1/play").status_code == 200

    def test_status_after_play(self, client: TestClient) -> None:
        client.post("/v1/play")

        data = client.get("/v1/play/status").json()
        assert data["can_play"] is False
        # Allow a second of slack for test execution time
        assert 14399 <= data["seconds_until_next_play"] <= 14400


class TestPlay:
    def test_first_play_allowed(self, client: TestClient) -> None:
        response = client.post("/v1/play")

        assert response.status_code == 200
        assert response.json() == {"allowed": True, "next_play_in_seconds": 14400}

    def test_second_play_refused_with_retry_after(self, client: TestClient) -> None:
        assert client.post("/v1/play").status_code == 200

        response = client.post("/v1/play")

        assert response.status_code == 429
        assert response.json()["detail"] == "Play cooldown active. Try again later."
        assert 14399 <= int(response.headers["Retry-After"]) <= 14400

    def test_retry_after_header_can_be_disabled(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings.app, "rate_limit_include_headers", False)
        client.post("/v1/play")

        response = client.post("/v1/play")

        assert response.status_code == 429
        assert "Retry-After" not in response.headers

    def test_forwarded_for_ignored_by_default(self, client: TestClient) -> None:
        assert client.post("/v1/play", headers={"X-Forwarded-For": "198.51.100.1"}).status_code == 200
        assert client.post("/v1/play", headers={"X-Forwarded-For": "198.51.100.2"}).status_code == 429

    def test_forwarded_for_when_trusted(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings.app, "trust_forwarded_for", True)

        first = client.post("/v1/play", headers={"X-Forwarded-For": "198.51.100.1, 10.0.0.1"})
        second = client.post("/v1/play", headers={"X-Forwarded-For": "198.51.100.2"})
        repeat = client.post("/v1/play", headers={"X-Forwarded-For": "198.51.100.1"})

        assert first.status_code == 200
        assert second.status_code == 200
        assert repeat.status_code == 429


class TestStoreFailures:
    def test_unreadable_store_reports_can_play(self) -> None:
        store = AsyncMock(spec=AbstractTTLStore)
        store.get.return_value = StoreFailure(reason="unavailable")

        with _client_with_store(store) as client:
            response = client.get("/v1/play/status")

        assert response.status_code == 200
        assert response.json()["can_play"] is True

    def test_unreadable_store_still_allows_recorded_play(self) -> None:
        store = AsyncMock(spec=AbstractTTLStore)
        store.get.return_value = StoreFailure(reason="timeout")
        store.set_with_expiry.return_value = StoreOk(None)

        with _client_with_store(store) as client:
            response = client.post("/v1/play")

        assert response.status_code == 200

    def test_unwritable_store_refuses_play(self) -> None:
        store = AsyncMock(spec=AbstractTTLStore)
        store.get.return_value = StoreOk(None)
        store.set_with_expiry.return_value = StoreFailure(reason="unavailable")

        with _client_with_store(store) as client:
            response = client.post("/v1/play")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "0"
        store.set_with_expiry.assert_awaited_once()

    def test_store_closed_on_shutdown(self) -> None:
        store = AsyncMock(spec=AbstractTTLStore)

        with _client_with_store(store):
            store.close.assert_not_called()

        store.close.assert_awaited_once()
