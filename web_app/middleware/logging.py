"""Request logging with the outcome of each short code operation."""

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Error kinds behind each status the API returns
STATUS_OUTCOMES = {
    400: "invalid-input",
    404: "not-found",
    422: "invalid-input",
    500: "internal",
    507: "exhausted",
}


def classify_status(status_code: int) -> str:
    """Name the outcome a response status stands for."""
    if status_code < 400:
        return "ok"
    if status_code in STATUS_OUTCOMES:
        return STATUS_OUTCOMES[status_code]
    return "internal" if status_code >= 500 else "client-error"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request: path, status, outcome and duration.

    Successful requests log at INFO, client errors at WARNING and
    internal errors at ERROR.
    """

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger(__name__)

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000
        outcome = classify_status(response.status_code)

        if response.status_code >= 500:
            log_level = logging.ERROR
        elif response.status_code >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        self.logger.log(
            log_level,
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({outcome}) in {duration_ms:.2f}ms from {client_ip}",
        )

        return response
