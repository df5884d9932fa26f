"""Per-route request limits backed by fastapi-limiter."""

from typing import Any, Optional

from fastapi import Depends
from fastapi_limiter.depends import RateLimiter

from .settings import settings


async def _noop_rate_limit() -> None:
    pass


def rate_limit(times: Optional[int] = None, seconds: int = 60) -> Any:
    """Allow ``times`` requests per client every ``seconds``.

    ``times`` defaults to RATE_LIMIT_PER_MINUTE. With RATE_LIMITING_ENABLED off
    the dependency does nothing, so Redis is only needed when limits apply.
    """
    if not settings.RATE_LIMITING_ENABLED:
        return Depends(_noop_rate_limit)
    return Depends(RateLimiter(times=times or settings.RATE_LIMIT_PER_MINUTE, seconds=seconds))


rate_limit_dependency = rate_limit()
# register/login/refresh accept credentials, so they get the tighter budget
credential_rate_limit_dependency = rate_limit(settings.AUTH_RATE_LIMIT_PER_MINUTE)
