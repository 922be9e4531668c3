"""
Request logging middleware for the BFF.

Assigns each incoming request an ID that is logged with every record and
forwarded to the Records Service, so one GraphQL call can be followed across
both tiers.
"""

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from records_svc.core.logging_config import REQUEST_ID_HEADER, clear_request_id, set_request_id

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log request start/completion and echo X-Request-ID on the response."""

    EXCLUDED_PATHS = {"/health", "/ready"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]
        set_request_id(request_id)

        path = request.url.path
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Request failed with exception",
                extra={"method": request.method, "path": path, "error": str(e)}
            )
            clear_request_id()
            raise

        if path not in self.EXCLUDED_PATHS:
            logger.info(
                "Request completed",
                extra={
                    "method": request.method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                }
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        clear_request_id()
        return response
