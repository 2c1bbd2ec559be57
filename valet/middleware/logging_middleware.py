"""
Logging Middleware - Request/Response logging
"""
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable
from valet.utils.logger import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS = {"/api/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all requests and responses

    Logs:
    - Request method, path, client
    - Response status code, duration
    - Errors if any

    Every response carries X-Process-Time and X-Request-ID headers; an
    incoming X-Request-ID is reused so provider retries can be correlated.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        """Process and log request/response"""

        # Basic health checks are polled by the load balancer
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.time()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        method = request.method
        path = request.url.path
        client_host = request.client.host if request.client else "unknown"

        logger.info(
            "→ %s %s [%s] from %s", method, path, request_id, client_host
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(
                "✗ %s %s [%s] ERROR (%sms): %s", method, path, request_id, duration_ms, e,
                exc_info=True
            )
            raise

        duration_ms = int((time.time() - start_time) * 1000)
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "← %s %s [%s] %s (%sms)", method, path, request_id, response.status_code, duration_ms
        )

        response.headers["X-Process-Time"] = str(duration_ms)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
