"""Process-wide logging setup.

Loggers only ever enqueue. The root logger holds a single ``QueueHandler``
that renders each record (JSON Lines or plain text) and adds the task's log
context. A ``QueueListener`` thread then writes the finished lines to the
console and/or a rotating file, so slow sinks never block the event loop.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from demo_service.infra.logging.context import ContextInjectingFilter
from demo_service.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from demo_service.core.settings.logs import LoggingSettings

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
_queue_handler: QueueHandler | None = None
_shutdown_hooked = False
_configured = False

logger = logging.getLogger(__name__)


def shutdown() -> None:
    """Flush and close the sinks, then unhook the queue from the root logger.

    Idempotent; also runs at interpreter exit.
    """
    global _log_queue, _listener, _queue_handler

    if _queue_handler is not None:
        logging.getLogger().removeHandler(_queue_handler)
        _queue_handler = None

    if _listener is not None:
        _listener.stop()  # drains what is still queued
        for sink in _listener.handlers:
            sink.close()
        _listener = None

    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Configure logging from ``LoggingSettings`` unless that already happened.

    Keyword arguments override individual settings; ``force`` reconfigures
    even after an earlier call.
    """
    global _configured

    if _configured and not force:
        return

    if log_settings is None:
        from demo_service.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**(log_settings.to_logging_kwargs() | configure_kwargs))
    _configured = True


def configure_logging(
    log_level: str = "INFO",
    console_level: str | None = None,
    file_level: str | None = None,
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "demo-service",
    sql_level: str = "WARNING",
) -> None:
    """(Re)build the logging pipeline.

    Args:
        log_level: Root level.
        console_level: stderr threshold, defaults to ``log_level``.
        file_level: File threshold, defaults to ``log_level``.
        file_path: Rotating log file; ``None`` writes no file.
        json_logs: JSON Lines when true, ``TEXT_FORMAT`` otherwise.
        console_enabled: Write to stderr.
        include_context: Copy the contextvar log context onto records.
        capture_warnings: Route ``warnings.warn`` through logging.
        file_max_bytes: Rotation size.
        file_backup_count: Rotated files kept.
        service_name: ``service`` field of every JSON line.
        sql_level: Level of the ``sqlalchemy.engine`` logger.

    With neither console nor file enabled no queue is attached at all and
    records simply go nowhere.
    """
    global _log_queue, _listener, _queue_handler, _shutdown_hooked

    shutdown()
    logging.captureWarnings(capture_warnings)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": log_level.upper(), "handlers": []},
            "loggers": {"sqlalchemy.engine": {"level": sql_level.upper()}},
        }
    )

    sinks = _open_sinks(
        console_level=(console_level or log_level) if console_enabled else None,
        file_level=file_level or log_level,
        file_path=Path(file_path) if file_path else None,
        file_max_bytes=file_max_bytes,
        file_backup_count=file_backup_count,
    )
    if not sinks:
        return

    _log_queue = Queue()
    _listener = QueueListener(_log_queue, *sinks, respect_handler_level=True)
    _listener.start()
    if not _shutdown_hooked:
        atexit.register(shutdown)
        _shutdown_hooked = True

    # QueueHandler.prepare() merges exc_info into msg, so the structured
    # rendering has to be done by this handler rather than by the sinks.
    _queue_handler = QueueHandler(_log_queue)
    _queue_handler.setFormatter(_record_formatter(json_logs, service_name))
    if include_context:
        # on the handler: logger filters skip records from child loggers
        _queue_handler.addFilter(ContextInjectingFilter())
    logging.getLogger().addHandler(_queue_handler)

    logger.debug("Logging configured", extra={"json_logs": json_logs, "sinks": len(sinks)})


def _open_sinks(
    *,
    console_level: str | None,
    file_level: str,
    file_path: Path | None,
    file_max_bytes: int,
    file_backup_count: int,
) -> list[logging.Handler]:
    sinks: list[logging.Handler] = []

    if console_level is not None:
        stderr = logging.StreamHandler()
        stderr.setLevel(console_level.upper())
        sinks.append(stderr)

    if file_path is not None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            file_path, maxBytes=file_max_bytes, backupCount=file_backup_count, encoding="utf-8"
        )
        rotating.setLevel(file_level.upper())
        sinks.append(rotating)

    # Lines arrive already rendered
    for sink in sinks:
        sink.setFormatter(logging.Formatter("%(message)s"))
    return sinks


def _record_formatter(json_logs: bool, service_name: str) -> logging.Formatter:
    if not json_logs:
        return logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)
    return JSONFormatter(static={"service": service_name})


__all__ = ["configure_logging", "setup_logging", "shutdown"]
