"""Logging infrastructure.

Provides structured logging with:
- JSONL format for log aggregation
- Automatic context injection (request_id, user_id, operation)
- QueueHandler + QueueListener for non-blocking I/O

Basic usage:
    from chardb.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123", user_id="u-1")
    logger.info("Processing request")  # Includes request_id and user_id
"""

from chardb.infra.logging.config import configure_logging, setup_logging, shutdown
from chardb.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from chardb.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
