"""
Logging setup.

Every record carries the current request's trace id (`-` outside a request),
which the HTTP middleware binds via `bind_trace_id`.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar, Token

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s trace_id=%(trace_id)s %(message)s"

_trace_id: ContextVar[str] = ContextVar("trace_id", default="-")


def bind_trace_id(trace_id: str) -> Token:
    return _trace_id.set(trace_id)


def reset_trace_id(token: Token) -> None:
    _trace_id.reset(token)


def current_trace_id() -> str:
    return _trace_id.get()


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = _trace_id.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    # Idempotent: uvicorn reload and tests may call this more than once.
    for handler in root.handlers:
        if getattr(handler, "_expense_api", False):
            root.setLevel(level)
            return None

    handler = logging.StreamHandler()
    handler._expense_api = True  # type: ignore[attr-defined]
    handler.addFilter(TraceIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
