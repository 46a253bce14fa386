"""
Logging setup (JSON lines on stdout)
"""
import json
import logging
import sys
from typing import Optional

import settings


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "severity": record.levelname,
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Include traceback if present
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Install a single JSON stdout handler on the root logger."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel((level or settings.LOG_LEVEL).upper())

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)  # bump to INFO to see SQL
    return root
