"""
Logging for friendgraph

structlog renders through the stdlib root logger. While a request is being
served its ID is bound in structlog's contextvars, so every event logged on
the way (store timings, engine events, error handlers) carries it.
"""

import logging
import sys
import time
import uuid
from typing import Any, Optional

import structlog
from pythonjsonlogger.json import JsonFormatter

from friendgraph.core.config import settings

REQUEST_ID_HEADER = b"x-request-id"

_HANDLER_NAME = "friendgraph.console"
_PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure stdlib and structlog; safe to call more than once"""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    production = settings.is_production

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JsonFormatter(_JSON_FORMAT) if production else logging.Formatter(_PLAIN_FORMAT)
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
            if production
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Access lines duplicate http.request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def _incoming_request_id(scope) -> Optional[str]:
    for key, value in scope.get("headers", []):
        if key == REQUEST_ID_HEADER and value:
            return value.decode("latin-1")
    return None


class RequestContextMiddleware:
    """
    Tag each HTTP request with an ID and log one http.request event for it.

    A caller-supplied x-request-id is reused, otherwise a new one is made.
    The ID is echoed on the response. 5xx responses log at warning level.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("friendgraph.request")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope) or uuid.uuid4().hex
        tokens = structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()
        status_code = 500

        async def send_with_request_id(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                message["headers"] = [
                    *message.get("headers", []),
                    (REQUEST_ID_HEADER, request_id.encode("latin-1")),
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            log = self.logger.warning if status_code >= 500 else self.logger.info
            log(
                "http.request",
                request_id=request_id,
                method=scope.get("method"),
                path=scope.get("path"),
                status_code=status_code,
                duration_ms=_elapsed_ms(started),
            )
            structlog.contextvars.reset_contextvars(**tokens)


class LatencyLogger:
    """
    Time a block and log it as a debug event named after the operation.

    Extra keyword arguments (users, statuses, row counts) are bound onto the
    event. The outcome is "ok" or the name of the exception that left the block.
    """

    def __init__(self, operation: str, logger: structlog.stdlib.BoundLogger, **context: Any):
        self.event = operation
        self.logger = logger.bind(**context)
        self.started = 0.0

    def __enter__(self):
        self.started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.debug(
            self.event,
            latency_ms=_elapsed_ms(self.started),
            outcome="ok" if exc_type is None else exc_type.__name__,
        )
        return False
