"""
Request logging middleware.

One log line per API request with its duration and a request ID. The ID
is echoed in the X-Request-ID response header and in error bodies, so a
failed lookup in the browser can be matched to the server log.
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Callable, Optional, Set

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("bookish.api")

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass
class LoggingConfig:
    """Configuration for request logging."""

    enabled: bool = True

    excluded_paths: Set[str] = field(default_factory=lambda: {
        "/",
        "/health",
        "/favicon.ico",
    })

    # A lookup slower than one provider timeout has hit at least one slow provider
    slow_request_threshold: float = 10.0


class StructuredLogFormatter(logging.Formatter):
    """JSON log lines for the bookish.* loggers."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        for key in ("method", "path", "query", "status_code", "duration_ms"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def get_request_id() -> str:
    """Request ID of the request being handled, or ""."""
    return request_id_var.get()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns request IDs and logs each lookup/library request."""

    def __init__(self, app: FastAPI, config: Optional[LoggingConfig] = None):
        super().__init__(app)
        self.config = config or LoggingConfig()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request_id_var.set(request_id)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        response.headers[REQUEST_ID_HEADER] = request_id

        path = request.url.path
        if not self.config.enabled or path in self.config.excluded_paths:
            return response

        slow = duration > self.config.slow_request_threshold
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400 or slow:
            level = logging.WARNING
        else:
            level = logging.INFO

        duration_ms = round(duration * 1000, 2)
        message = f"{request.method} {path} -> {response.status_code} ({duration_ms}ms)"
        if slow:
            message = f"[SLOW] {message}"

        logger.log(
            level,
            message,
            extra={
                "method": request.method,
                "path": path,
                "query": request.url.query or None,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        return response


def setup_logging(
    app: FastAPI,
    config: Optional[LoggingConfig] = None,
    structured: bool = True,
) -> None:
    """
    Install the request logging middleware.

    Args:
        app: FastAPI application instance.
        config: Logging configuration.
        structured: Emit bookish.* log records as JSON lines.
    """
    bookish_logger = logging.getLogger("bookish")
    if structured and not bookish_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredLogFormatter())

        bookish_logger.addHandler(handler)
        bookish_logger.setLevel(logging.INFO)

    app.add_middleware(RequestLoggingMiddleware, config=config or LoggingConfig())
