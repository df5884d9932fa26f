import logging
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..utils.clock import monotonic_start_ns, since_ms

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and logs its outcome.

    The id is taken from X-Request-ID when the caller sends one. Once a token
    guard has run, the authenticated user id is added to the log line.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        start_ns = monotonic_start_ns()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"[{request_id}] {request.method} {request.url.path} failed "
                f"after {since_ms(start_ns):.1f}ms"
            )
            raise

        elapsed_ms = since_ms(start_ns)
        user = getattr(request.state, "user", None)
        suffix = f" user={user.user_id}" if user is not None else ""
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} "
            f"{response.status_code} {elapsed_ms:.1f}ms{suffix}"
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms / 1000:.4f}"
        return response
