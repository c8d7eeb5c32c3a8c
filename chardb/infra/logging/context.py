"""Context management for structured logging.

Request-scoped fields (request id, user id, operation name) are kept in a
``ContextVar`` so every log record emitted while handling a request carries
them, across ``await`` boundaries, without passing them around explicitly.
"""

from __future__ import annotations

from contextvars import ContextVar
import logging
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        ```python
        set_log_context(request_id="abc-123")
        set_log_context(user_id="u-42")  # Now has both
        logger.info("Evaluating policy")
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Drop every field from the current logging context.

    Mostly useful in tests.
    """
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Copy the contextvar fields onto each LogRecord.

    Attributes already present on the record (for instance passed through
    ``extra=``) are left untouched.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
