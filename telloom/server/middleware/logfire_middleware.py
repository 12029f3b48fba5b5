"""
Request timing middleware.

Every request is reported through ``log_api_request`` (a Logfire record when
tracing is on) and answered with an ``X-Process-Time`` header in
milliseconds. Requests slower than ``slow_request_ms`` and requests whose
handler raised are also written to the application log.
"""

import time
from typing import Awaitable, Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from telloom.core.logging_config import get_logger
from telloom.core.monitoring import log_api_request

logger = get_logger(__name__)

SLOW_REQUEST_MS = 1000.0


def _elapsed_ms(since: float) -> float:
    return (time.perf_counter() - since) * 1000


class LogfireMiddleware(BaseHTTPMiddleware):
    """Times requests and reports them to Logfire and the log."""

    def __init__(self, app, slow_request_ms: float = SLOW_REQUEST_MS) -> None:
        super().__init__(app)
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        started = request.state.start_time = time.perf_counter()
        context = {"method": request.method, "path": request.url.path}

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed = _elapsed_ms(started)
            log_api_request(**context, status_code=500, duration_ms=elapsed)
            logger.error(
                f"API request failed: {context['method']} {context['path']}",
                exc_info=True,
                extra={**context, "duration_ms": elapsed, "error": str(e)},
            )
            raise

        elapsed = _elapsed_ms(started)
        log_api_request(**context, status_code=response.status_code, duration_ms=elapsed)
        response.headers["X-Process-Time"] = f"{elapsed:.2f}"

        if elapsed > self.slow_request_ms:
            logger.warning(
                f"Slow API request: {context['method']} {context['path']} took {elapsed:.2f}ms",
                extra={**context, "duration_ms": elapsed, "status_code": response.status_code},
            )
        return response
