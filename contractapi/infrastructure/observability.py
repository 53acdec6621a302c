"""Invocation Logging - one log line per lifecycle event, tagged with the call it belongs to.

Invariants:
    - Records carry the invocation tags set by the router and executor:
      tx_id, namespace, function, stage, error_code (plus path from the API)
    - Untagged records (start-up, SQL store) render with just the message
    - setup_logging() is idempotent: calling it again replaces our handler

Design Decisions:
    - stdlib logging with custom formatters; tags travel in `extra=`
    - "json" for log shippers, "text" for a terminal
"""

import json
import logging
from datetime import datetime, timezone

INVOCATION_TAGS = ("tx_id", "namespace", "function", "stage", "error_code", "path")


def invocation_tags(record: logging.LogRecord) -> dict[str, str]:
    """The invocation tags present on a record, in a stable order."""
    tags = {}
    for name in INVOCATION_TAGS:
        value = getattr(record, name, None)
        if value is not None:
            tags[name] = value
    return tags


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **invocation_tags(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable line with the invocation tags appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        tags = invocation_tags(record)
        if not tags:
            return line
        first, newline, rest = line.partition("\n")
        suffix = " ".join(f"{k}={v}" for k, v in tags.items())
        return f"{first} [{suffix}]{newline}{rest}"


class _InvocationHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, _InvocationHandler)]:
        root.removeHandler(handler)
    handler = _InvocationHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
