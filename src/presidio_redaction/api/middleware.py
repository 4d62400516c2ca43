"""FastAPI middleware binding export context into structlog."""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

SIGNAL_PATHS = {"/v1/traces": "traces", "/v1/logs": "logs"}
PROBE_PATHS = frozenset({"/health", "/metrics"})


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Bind a request id (and the signal, for export paths) to every log event.

    Per-field redaction errors logged while a batch is processed carry the
    request id, so they can be traced back to the export that produced them.
    An incoming X-Request-ID is reused; the id is echoed in the response.
    Probe requests are logged at DEBUG.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        path = request.url.path

        context = {"request_id": request_id, "path": path}
        if path in SIGNAL_PATHS:
            context["signal"] = SIGNAL_PATHS[path]
            context["content_length"] = request.headers.get("content-length")
        structlog.contextvars.bind_contextvars(**context)

        log = logger.debug if path in PROBE_PATHS else logger.info
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Export request failed",
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        log(
            "Request completed",
            request_id=request_id,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        response.headers["X-Request-ID"] = request_id
        return response
