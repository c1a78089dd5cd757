"""Logging infrastructure.

``setup_logging()`` wires the root logger to a QueueHandler whose listener
writes JSON Lines (or plain text) to stderr and an optional rotating file.
Context set with ``set_log_context`` rides along on every record, and
``get_lazy_logger`` gives repositories DEBUG messages that cost nothing when
DEBUG is off.

    setup_logging()
    set_log_context(request_id="abc-123")
    logging.getLogger(__name__).info("Processing request")  # carries request_id
"""

from demo_service.infra.logging.config import configure_logging, setup_logging, shutdown
from demo_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)
from demo_service.infra.logging.formatters import JSONFormatter
from demo_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
