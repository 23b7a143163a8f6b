"""
HTTP middleware: trace id propagation, request logging and the per-request
deadline used to bound store calls.
"""

from __future__ import annotations

import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .log import bind_trace_id, reset_trace_id

TRACE_ID_HEADER = "X-Trace-Id"
TRACE_ID_RESPONSE_HEADER = "trace-id"

logger = logging.getLogger(__name__)


def setup_middleware(app: FastAPI, *, request_timeout_s: float) -> None:
    @app.middleware("http")
    async def trace_and_log(request: Request, call_next):
        trace_id = (request.headers.get(TRACE_ID_HEADER) or "").strip() or str(uuid4())
        token = bind_trace_id(trace_id)
        started = time.monotonic()
        request.state.deadline = started + request_timeout_s
        try:
            logger.info("request method=%s url=%s", request.method, request.url.path)
            try:
                response = await call_next(request)
            except Exception:
                # Unclassified failure: log in full, answer with an opaque body.
                logger.exception("unhandled_error method=%s url=%s", request.method, request.url.path)
                response = JSONResponse(status_code=500, content={})
            logger.info(
                "response status=%s elapsed_ms=%.1f",
                response.status_code,
                (time.monotonic() - started) * 1000,
            )
            response.headers[TRACE_ID_RESPONSE_HEADER] = trace_id
            return response
        finally:
            reset_trace_id(token)


def remaining_seconds(request: Request, *, floor: float = 0.001) -> float | None:
    """
    Seconds left before the request deadline, or None when no deadline is set.
    """
    deadline = getattr(request.state, "deadline", None)
    if deadline is None:
        return None
    return max(deadline - time.monotonic(), floor)
