from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, Union


# Context variables for enriched logging
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
caller_id_var: ContextVar[Optional[str]] = ContextVar("caller_id", default=None)

# Rendered for records emitted outside an authenticated call (startup, reads).
ANONYMOUS_CALLER = "anonymous"


# PUBLIC_INTERFACE
@contextmanager
def bind_caller(identity: str) -> Iterator[str]:
    """
    Attribute every log record emitted inside the block to `identity`.

    The previous binding is restored on exit, so nested bindings (a seed run
    inside a request, for example) unwind correctly.
    """
    token = caller_id_var.set(identity)
    try:
        yield identity
    finally:
        caller_id_var.reset(token)


class LoggingContextFilter(logging.Filter):
    """
    Logging filter that injects correlation_id and caller from contextvars
    into each log record so formatters can include them.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.correlation_id = correlation_id_var.get() or "-"
        record.caller = caller_id_var.get() or ANONYMOUS_CALLER
        return True


# PUBLIC_INTERFACE
def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure root logging with a structured format and context filter.

    `level` accepts a logging constant or its name ("DEBUG" shows every
    rejected registry call).
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    handler = logging.StreamHandler(stream=sys.stdout)
    fmt = (
        "%(asctime)s | %(levelname)s | %(name)s | cid=%(correlation_id)s | caller=%(caller)s | "
        "%(message)s"
    )
    handler.setFormatter(logging.Formatter(fmt=fmt))
    handler.addFilter(LoggingContextFilter())

    root = logging.getLogger()
    # Remove pre-existing default handlers configured elsewhere (e.g., basicConfig)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)
