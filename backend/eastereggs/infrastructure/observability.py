"""Structured Logging: JSON and console formatters for ledger operations.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Ledger context (actor, operation, error_code, request_id, ...) is copied
      from `extra=` when present and never invented
    - setup_logging is idempotent: calling it again replaces its own handler
"""

import json
import logging
from datetime import datetime, timezone

_CONTEXT_FIELDS = (
    "actor", "receiver", "operation", "error_code", "request_id",
    "answer_index", "amount", "attempt", "path", "event_name",
)

# Chatty third-party loggers never go below WARNING
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore")


def _context_of(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in _CONTEXT_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context_of(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines with ledger context appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context_of(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    global _handler
    if _handler is not None:
        logging.root.removeHandler(_handler)
    _handler = logging.StreamHandler()
    _handler.setFormatter(JSONFormatter() if fmt == "json" else ConsoleFormatter())
    logging.root.addHandler(_handler)

    root_level = getattr(logging, level.upper(), logging.INFO)
    logging.root.setLevel(root_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))
