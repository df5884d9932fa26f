import logging

import redis.asyncio as redis
from fastapi_limiter import FastAPILimiter

from ..config import settings

logger = logging.getLogger(__name__)


async def init_limiter() -> None:
    if not settings.RATE_LIMITING_ENABLED:
        logger.info("Rate limiting disabled")
        return

    logger.info("Initializing rate limiter")
    connection = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    await FastAPILimiter.init(connection)


async def close_limiter() -> None:
    if not settings.RATE_LIMITING_ENABLED:
        return

    logger.info("Closing rate limiter")
    await FastAPILimiter.close()
