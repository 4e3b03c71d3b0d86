"""
Per-request deadline for the feed API.

A feed request is one SELECT plus mapping, so anything running past the
deadline is almost always waiting on the pool or on a slow plan. Such a
request is abandoned with 504 and counted in
``rignum_request_timeouts_total``. Health checks are never cut short.
"""

import asyncio
from collections.abc import Iterable

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from rignum.observability.metrics import MetricsCollector, get_metrics

logger = structlog.get_logger(__name__)

DEFAULT_EXEMPT_PATHS = ("/health",)


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Answer 504 when a request outlives ``timeout_seconds``."""

    def __init__(
        self,
        app,
        timeout_seconds: float = 30.0,
        exempt_paths: Iterable[str] = DEFAULT_EXEMPT_PATHS,
        metrics: MetricsCollector | None = None,
    ):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds
        self.exempt_paths = tuple(exempt_paths)
        self._metrics = metrics

    def _is_exempt(self, path: str) -> bool:
        return path.startswith(self.exempt_paths)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if self._is_exempt(path):
            return await call_next(request)

        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await call_next(request)
        except TimeoutError:
            (self._metrics or get_metrics()).record_request_timeout(path)
            logger.warning("request_deadline_exceeded", path=path, timeout_seconds=self.timeout_seconds)
            return JSONResponse(
                status_code=504,
                content={
                    "detail": "Request timed out",
                    "error_type": "timeout",
                    "timeout_seconds": self.timeout_seconds,
                },
            )
