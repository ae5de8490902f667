"""Request logging middleware."""
import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from cedoi.core.logging_config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds a request id to every log line of a request and logs its outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse a proxy-supplied id so logs line up across hops
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        logger.info(
            "request_started",
            query_params=str(request.query_params) if request.query_params else None,
        )
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "request_failed",
                exception_type=type(exc).__name__,
                exception=str(exc),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            client_host=request.client.host if request.client else None,
        )
        return response
