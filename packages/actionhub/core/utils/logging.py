"""Logging configuration for ActionHub.

Text logs go to stdout by default; ``structured=True`` switches every handler
to one JSON object per line so batch runs can be filtered by ``batch_id`` and
other adapter context.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
import functools
import inspect
import json
import logging
import sys
import time
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that flood DEBUG output during image encoding
NOISY_LOGGERS: tuple[str, ...] = ("PIL", "asyncio")

# Attributes every LogRecord carries; anything else came from `extra` or an adapter
_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
}


class StructuredJSONFormatter(logging.Formatter):
    """Render each record as a single JSON line.

    Output shape::

        {"level": "INFO", "message": "...", "timestamp": "...+00:00",
         "context": {"logger_name": ..., "module": ..., "function": ...,
                     "line": ..., <adapter fields>}}
    """

    def format(self, record: logging.LogRecord) -> str:
        context: dict[str, Any] = {
            "logger_name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread_name": record.threadName,
        }
        if record.exc_info:
            context.update(self._exception_context(record))

        context.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )

        return json.dumps(
            {
                "level": record.levelname,
                "message": record.getMessage(),
                "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "context": context,
            },
            default=str,
        )

    def _exception_context(self, record: logging.LogRecord) -> dict[str, Any]:
        exc_type, exc_value, _ = record.exc_info or (None, None, None)
        return {
            "error_type": exc_type.__name__ if exc_type else None,
            "error_message": str(exc_value) if exc_value is not None else None,
            "stack_trace": record.exc_text or self.formatException(record.exc_info),
        }


def _build_handler(filename: str | None) -> logging.Handler:
    if filename:
        return logging.FileHandler(filename, encoding="utf-8")
    return logging.StreamHandler(sys.stdout)


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Configure root logging for the CLI and batch runs.

    Safe to call repeatedly; existing root handlers are replaced.

    Args:
        level: Level name, case-insensitive (DEBUG, INFO, WARNING, ...).
        format_string: Text format; ignored when ``structured`` is set.
        filename: Log file path. Logs go to stdout when omitted.
        structured: Emit JSON lines via ``StructuredJSONFormatter``.

    Examples:
        >>> configure_logging(level="INFO")
        >>> configure_logging(level="DEBUG", structured=True, filename="export.jsonl")
    """
    handler = _build_handler(filename)
    handler.setFormatter(
        StructuredJSONFormatter() if structured else logging.Formatter(format_string or DEFAULT_FORMAT)
    )
    logging.basicConfig(level=getattr(logging, level.upper()), handlers=[handler], force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)


def get_logger(name: str, **context: Any) -> logging.Logger | logging.LoggerAdapter:
    """Return the named logger, wrapped in a LoggerAdapter when context is given.

    The executor uses this to stamp every batch log line with its ``batch_id``.
    """
    base = logging.getLogger(name)
    if context:
        return logging.LoggerAdapter(base, context)
    return base


def log_performance(func: F) -> F:
    """Log the wall time of each call to ``func`` at DEBUG.

    Works for plain and ``async`` functions.
    """
    log = logging.getLogger(func.__module__)

    def _report(start: float) -> None:
        log.debug(f"{func.__name__!r} took {time.perf_counter() - start:.4f}s")

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                _report(start)

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            _report(start)

    return wrapper  # type: ignore[return-value]
