"""Unit tests for the in-memory TTL store."""

import asyncio
import threading

import pytest

from app.adapters.ttl_store.base import StoreOk
from app.adapters.ttl_store.in_memory import InMemoryTTLStore


@pytest.mark.asyncio
async def test_missing_key_returns_none(clock) -> None:
    store = InMemoryTTLStore(clock=clock.time)

    assert await store.get("k") == StoreOk(None)


@pytest.mark.asyncio
async def test_set_then_get(clock) -> None:
    store = InMemoryTTLStore(clock=clock.time)

    assert await store.set_with_expiry("k", "v", 1000) == StoreOk(None)
    assert await store.get("k") == StoreOk("v")


@pytest.mark.asyncio
async def test_entry_expires_after_ttl(clock) -> None:
    store = InMemoryTTLStore(clock=clock.time)
    await store.set_with_expiry("k", "v", 1500)

    clock.advance(milliseconds=1499)
    assert await store.get("k") == StoreOk("v")

    clock.advance(milliseconds=1)
    assert await store.get("k") == StoreOk(None)
    assert len(store) == 0


@pytest.mark.asyncio
async def test_overwrite_resets_expiry(clock) -> None:
    store = InMemoryTTLStore(clock=clock.time)
    await store.set_with_expiry("k", "old", 1000)

    clock.advance(milliseconds=900)
    await store.set_with_expiry("k", "new", 1000)

    clock.advance(milliseconds=900)
    assert await store.get("k") == StoreOk("new")


@pytest.mark.asyncio
async def test_write_sweeps_expired_entries(clock) -> None:
    store = InMemoryTTLStore(clock=clock.time)
    await store.set_with_expiry("a", "1", 10)
    await store.set_with_expiry("b", "2", 10)

    clock.advance(seconds=1)
    await store.set_with_expiry("c", "3", 10)

    assert len(store) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("ttl_ms", [0, -1])
async def test_rejects_non_positive_ttl(ttl_ms: int) -> None:
    store = InMemoryTTLStore()

    with pytest.raises(ValueError):
        await store.set_with_expiry("k", "v", ttl_ms)


@pytest.mark.asyncio
async def test_ping_and_close() -> None:
    store = InMemoryTTLStore()

    assert await store.ping() == StoreOk(True)
    await store.close()


def test_thread_safety_under_concurrent_writes() -> None:
    store = InMemoryTTLStore()
    total_keys = 50

    def _writer(idx: int) -> None:
        asyncio.run(store.set_with_expiry(f"k-{idx}", str(idx), 60_000))

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(total_keys)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == total_keys
