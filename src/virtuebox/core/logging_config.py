"""Logging setup.

Human-readable output for development, JSON lines for production log
aggregators. Modules log through ``logging.getLogger(__name__)``.
"""

import json
import logging
import sys
from datetime import datetime
from typing import Optional

import pytz

from virtuebox import config


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(pytz.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


READABLE_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure the root logger.

    Args:
        level: Log level name. Defaults to LOG_LEVEL.
        fmt: "text" or "json". Defaults to LOG_FORMAT.
    """
    level = (level or config.LOG_LEVEL).upper()
    fmt = (fmt or config.LOG_FORMAT).lower()

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(READABLE_FORMAT))

    root = logging.getLogger()
    # Replace handlers so repeated setup (reloads, tests) does not duplicate output
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
