"""Structured Logging — one JSON object per line, carrying task and user ids.

Invariants:
    - Every line has timestamp, level, logger and message
    - Membership context (task_id, user_id, operation, attempt) and error_code are
      emitted only when the caller passed them as extra=
    - LOG_FORMAT=text switches to a single-line human format for local runs

Design Decisions:
    - Stdlib logging with a custom Formatter: retries and conflicts are searchable
      by task_id without a log-shipping agent parsing free text
    - Installed once from the FastAPI lifespan, never at import time
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "task_id", "user_id", "operation", "attempt", "error_code",
    "path", "collection",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
