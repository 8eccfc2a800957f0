"""Per-client play cooldown backed by a TTL store.

A client may play once per cooldown window. The last allowed play is stored as
an ISO-8601 UTC timestamp under a key derived from the client identifier, with
a store expiry equal to the window. The expiry only keeps the store small:
elapsed time is always recomputed from the stored timestamp.

Failure policy:
- Unreadable state is treated as "no record" (fail open): the client may play.
- An unwritable play record denies the play (fail closed): allowing it would
  let the client repeat the action without any cooldown.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from app.adapters.ttl_store.base import AbstractTTLStore, StoreFailure

logger = logging.getLogger(__name__)

COOLDOWN_MS = 4 * 60 * 60 * 1000
COOLDOWN_KEY_PREFIX = "user"

_ONE_MS = timedelta(milliseconds=1)


def build_cooldown_key(client_id: str) -> str:
    """Build the store key for a client identifier.

    The identifier is used verbatim (no case or whitespace normalization), so
    distinct identifiers always map to distinct keys.

    Examples:
        >>> build_cooldown_key("203.0.113.7")
        'user-203.0.113.7'
    """
    return f"{COOLDOWN_KEY_PREFIX}-{client_id}"


def _hash_client_id(client_id: str) -> str:
    """Hash the client identifier for logging without exposing the IP."""
    return hashlib.sha256(client_id.encode()).hexdigest()[:16]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _truncate_to_ms(value: datetime) -> datetime:
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp as ISO-8601 UTC with millisecond precision."""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def parse_timestamp(raw: str) -> datetime:
    """Parse a stored timestamp.

    Accepts the ``+00:00`` form written by this service as well as the ``Z``
    suffix. Naive values are taken to be UTC.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp.
    """
    parsed = datetime.fromisoformat(raw.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class CooldownLimiter:
    """Decides whether a client may play now and records allowed plays."""

    def __init__(
        self,
        store: AbstractTTLStore,
        *,
        cooldown_ms: int = COOLDOWN_MS,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Shared TTL store handle.
            cooldown_ms: Cooldown window in milliseconds.
            clock: Source of timezone-aware "now" values.

        Raises:
            ValueError: If cooldown_ms is not positive.
        """
        if cooldown_ms < 1:
            raise ValueError("cooldown_ms must be >= 1")

        self._store = store
        self._cooldown_ms = cooldown_ms
        self._clock = clock

    @property
    def cooldown_seconds(self) -> int:
        """Full cooldown window in whole seconds, rounded up."""
        return -(-self._cooldown_ms // 1000)

    def _now(self) -> datetime:
        return _truncate_to_ms(self._clock())

    async def time_until_next_play(self, client_id: str) -> int:
        """Return how many seconds the client must wait before playing.

        Read-only. Returns 0 when the client may play now, including when the
        store cannot be read or holds an unreadable value.

        Args:
            client_id: Opaque client identifier (typically an IP address).

        Returns:
            Non-negative number of seconds, rounded up.
        """
        key = build_cooldown_key(client_id)
        result = await self._store.get(key)

        if isinstance(result, StoreFailure):
            logger.warning(
                "cooldown.read_failed",
                extra={
                    "client_hash": _hash_client_id(client_id),
                    "reason": result.reason,
                    "policy": "fail_open",
                },
            )
            return 0

        raw = result.value
        if raw is None:
            return 0

        try:
            last_play = parse_timestamp(raw)
        except ValueError:
            logger.warning(
                "cooldown.invalid_record",
                extra={
                    "client_hash": _hash_client_id(client_id),
                    "policy": "fail_open",
                },
            )
            return 0

        elapsed_ms = (self._now() - last_play) // _ONE_MS
        # A record from the future (writer clock ahead) counts as written now.
        elapsed_ms = max(0, elapsed_ms)

        if elapsed_ms >= self._cooldown_ms:
            return 0

        return -(-(self._cooldown_ms - elapsed_ms) // 1000)

    async def validate(self, client_id: str) -> bool:
        """Allow and record a play if the client is out of cooldown.

        The eligibility check and the write are two separate store calls, so two
        concurrent calls for the same client can both be allowed.

        Args:
            client_id: Opaque client identifier (typically an IP address).

        Returns:
            True if the play is allowed and recorded, False otherwise.
        """
        client_hash = _hash_client_id(client_id)

        remaining = await self.time_until_next_play(client_id)
        if remaining != 0:
            logger.info(
                "cooldown.denied",
                extra={"client_hash": client_hash, "retry_after_s": remaining},
            )
            return False

        key = build_cooldown_key(client_id)
        result = await self._store.set_with_expiry(
            key, format_timestamp(self._now()), self._cooldown_ms
        )

        if isinstance(result, StoreFailure):
            logger.error(
                "cooldown.write_failed",
                extra={
                    "client_hash": client_hash,
                    "reason": result.reason,
                    "policy": "fail_closed",
                },
            )
            return False

        logger.info(
            "cooldown.allowed",
            extra={"client_hash": client_hash, "cooldown_s": self.cooldown_seconds},
        )
        return True
