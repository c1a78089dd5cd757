"""JSON Lines rendering for log records."""
from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

# Everything a bare LogRecord carries; any other attribute came from extra= or the log context
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

_DEFAULT_KEYS = {"level": "levelname", "logger": "name", "message": "message"}


def _utc_iso(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=UTC).isoformat(timespec="milliseconds")
    return stamp.removesuffix("+00:00") + "Z"


def _one_line(text: str) -> str:
    return text.replace("\n", "\\n")


class JSONFormatter(logging.Formatter):
    """Render a record as one JSON object per line.

    ``fmt_keys`` maps output keys to record attributes, ``static`` adds fixed
    fields (for example the service name), and every non-standard record
    attribute is appended as-is. Values json cannot encode go through
    ``str()``.

        {"level": "INFO", "logger": "repository.User", "message": "Entity deleted",
         "timestamp": "2026-01-05T09:30:00.125Z", "service": "demo-service", "id": "7"}
    """

    def __init__(
        self,
        fmt_keys: dict[str, str] | None = None,
        static: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys or dict(_DEFAULT_KEYS)
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()

        payload: dict[str, Any] = {key: getattr(record, attr, None) for key, attr in self.fmt_keys.items()}
        payload["timestamp"] = _utc_iso(record.created)
        if record.exc_info:
            payload["exception"] = _one_line(self.formatException(record.exc_info))
        if record.stack_info:
            payload["stack_trace"] = _one_line(record.stack_info)
        payload.update(self.static)

        for attr, value in vars(record).items():
            if attr not in _STANDARD_ATTRS:
                payload.setdefault(attr, value)

        return json.dumps(payload, ensure_ascii=False, default=str)


__all__ = ["JSONFormatter"]
