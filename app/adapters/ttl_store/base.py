"""TTL store interface and result types.

Store operations never raise on connectivity or protocol problems. They return
``StoreOk`` or ``StoreFailure`` so callers decide, explicitly, whether a failure
should be treated permissively or restrictively.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class StoreOk(Generic[T]):
    """Successful store operation.

    Attributes:
        value: Operation payload (``None`` for writes and for missing keys).
    """

    value: T


@dataclass(frozen=True)
class StoreFailure:
    """Failed store operation.

    Attributes:
        reason: Short machine-friendly description (e.g. ``"timeout"``).
        error: The underlying exception, kept for logging only.
    """

    reason: str
    error: BaseException | None = None


StoreResult = Union[StoreOk[T], StoreFailure]


def validate_ttl_ms(ttl_ms: int) -> None:
    """Reject non-positive expiries before they reach a backend."""

    if ttl_ms < 1:
        raise ValueError("ttl_ms must be >= 1")


class AbstractTTLStore(ABC):
    """Interface for key-value stores with per-key millisecond expiry."""

    @abstractmethod
    async def get(self, key: str) -> StoreResult[str | None]:
        """Read the value stored under ``key``.

        Returns:
            ``StoreOk(None)`` when the key is missing or expired,
            ``StoreOk(value)`` when present, ``StoreFailure`` on error.
        """
        raise NotImplementedError

    @abstractmethod
    async def set_with_expiry(self, key: str, value: str, ttl_ms: int) -> StoreResult[None]:
        """Create or overwrite ``key`` and restart its expiry countdown.

        Args:
            key: Store key.
            value: String value to store.
            ttl_ms: Expiry in milliseconds (must be >= 1).

        Raises:
            ValueError: If ttl_ms is not positive.
        """
        raise NotImplementedError

    @abstractmethod
    async def ping(self) -> StoreResult[bool]:
        """Check that the backend is reachable."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources. Default is a no-op."""
        return None
