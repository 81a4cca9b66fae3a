"""Redis connection shared by every request handler."""

import logging

from redis.asyncio import Redis

from otp_guard.config import settings

logger = logging.getLogger(__name__)

redis_client: Redis = Redis.from_url(settings.redis_url, decode_responses=True)


async def ping_redis() -> None:
    """Fail fast if the store is unreachable."""
    await redis_client.ping()
    logger.info("Redis connection established")


async def close_redis() -> None:
    await redis_client.aclose()
