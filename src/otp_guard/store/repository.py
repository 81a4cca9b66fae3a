"""OTP state repository — data access layer over the expiring key-value store."""

from __future__ import annotations

from enum import Enum

from redis.asyncio import Redis


class OtpKey(str, Enum):
    """Per-identity keys; each is stored as ``<prefix>:<identity>``."""

    CODE = "otp"
    COOLDOWN = "otp_cooldown"
    REQUEST_COUNT = "otp_request_count"
    SPAM_LOCK = "otp_spam_lock"
    ATTEMPTS = "otp_attempts"
    LOCK = "otp_lock"

    def for_identity(self, identity: str) -> str:
        return f"{self.value}:{identity}"


FLAG_VALUE = "true"


class OtpStateRepository:
    """Encapsulates every Redis call made on behalf of the OTP guard.

    Every value lives under its own key with its own TTL, so "absent"
    always means "expired or never set".
    """

    def __init__(self, redis: Redis) -> None:
        self._redis = redis

    # ── Flags ────────────────────────────────────────────

    async def has_flag(self, kind: OtpKey, identity: str) -> bool:
        return await self._redis.get(kind.for_identity(identity)) is not None

    async def set_flag(self, kind: OtpKey, identity: str, ttl: int) -> None:
        await self._redis.set(kind.for_identity(identity), FLAG_VALUE, ex=ttl)

    # ── Code ─────────────────────────────────────────────

    async def get_code(self, identity: str) -> str | None:
        return await self._redis.get(OtpKey.CODE.for_identity(identity))

    async def save_code(self, identity: str, code: str, ttl: int) -> None:
        """Store *code*, replacing any code still live for *identity*."""
        await self._redis.set(OtpKey.CODE.for_identity(identity), code, ex=ttl)

    async def clear_code(self, identity: str) -> None:
        """Drop the code together with its failed-attempt counter."""
        await self._redis.delete(
            OtpKey.CODE.for_identity(identity),
            OtpKey.ATTEMPTS.for_identity(identity),
        )

    # ── Counters ─────────────────────────────────────────

    async def get_counter(self, kind: OtpKey, identity: str) -> int | None:
        """Return the counter value, or ``None`` when the key is absent."""
        raw = await self._redis.get(kind.for_identity(identity))
        return int(raw) if raw is not None else None

    async def increment_counter(self, kind: OtpKey, identity: str, ttl: int) -> int:
        """Atomically add one to a counter and (re)start its TTL.

        ``INCR`` and ``EXPIRE`` run in a single MULTI/EXEC so concurrent
        requests never read the same pre-increment value.  The expiry is
        refreshed on each call, i.e. the window slides with activity.
        """
        key = kind.for_identity(identity)
        async with self._redis.pipeline(transaction=True) as pipe:
            count, _ = await pipe.incr(key).expire(key, ttl).execute()
        return int(count)

    # ── Introspection ────────────────────────────────────

    async def ttl(self, kind: OtpKey, identity: str) -> int | None:
        """Seconds left on a key, or ``None`` if it does not exist."""
        remaining = await self._redis.ttl(kind.for_identity(identity))
        return remaining if remaining >= 0 else None
