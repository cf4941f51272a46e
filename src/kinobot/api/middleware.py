"""Request logging middleware."""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from kinobot.utils.logger import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log command requests and how long they took."""

    async def dispatch(self, request: Request, call_next):
        """Log request before processing and response after."""
        if not request.url.path.startswith("/commands/"):
            return await call_next(request)

        start_time = time.time()
        logger.info("Incoming command request", method=request.method, path=request.url.path)

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Command request completed",
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        return response
