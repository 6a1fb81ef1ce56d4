"""
Request logging middleware.
"""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("hotel_commissions.http")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        start = time.perf_counter()
        client = request.client.host if request.client else "-"

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(
                f"{request.method} {request.url.path} ERROR - {duration_ms:.0f}ms - {client}"
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} - {duration_ms:.0f}ms - {client}"
        )
        return response
