"""
Performance tracking middleware for monitoring request latency
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("healthvoice.performance")

SLOW_REQUEST_SECONDS = 1.0


class PerformanceMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and latency for every request
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        process_time_ms = round(process_time * 1000, 2)

        logger.info(
            "PERFORMANCE: method=%s path=%s status=%s latency=%sms request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            process_time_ms,
            getattr(request.state, "request_id", "unknown"),
        )

        response.headers["X-Process-Time"] = str(process_time_ms)

        if process_time > SLOW_REQUEST_SECONDS:
            logger.warning(
                "SLOW_REQUEST: method=%s path=%s latency=%sms",
                request.method,
                request.url.path,
                process_time_ms,
            )

        return response
