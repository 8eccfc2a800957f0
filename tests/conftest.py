"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any ``app`` import so the global settings
object is built from them: tests run against the in-memory store and never
need a Redis server.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

os.environ.setdefault("APP_STORE_BACKEND", "memory")
os.environ.setdefault("APP_TRUST_FORWARDED_FOR", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone

import pytest


class FakeClock:
    """Deterministic UTC clock used by limiter and store tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def time(self) -> float:
        return self.current.timestamp()

    def advance(self, **delta: float) -> None:
        self.current += timedelta(**delta)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
