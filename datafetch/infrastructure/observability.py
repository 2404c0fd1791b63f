"""Structured Logging — JSON formatter and setup for datafetch log records.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (field_name, function_name, parameter_name, execution_kind,
      error_code) surfaced when present
    - JSON format by default, human-readable on request

Design Decisions:
    - JSONFormatter over third-party libs: stdlib logging only
    - setup_logging called once by the embedding application; level and
      format come from DATAFETCH_LOG_LEVEL / DATAFETCH_LOG_FORMAT unless given
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "field_name", "function_name", "parameter_name",
    "execution_kind", "error_code",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Handler:
    """Attach one stream handler to the datafetch logger and return it.

    level and fmt default to settings.log_level and settings.log_format.
    """
    from datafetch.config import get_settings

    settings = get_settings()
    level = level or settings.log_level
    fmt = fmt or settings.log_format
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    package_logger = logging.getLogger("datafetch")
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
