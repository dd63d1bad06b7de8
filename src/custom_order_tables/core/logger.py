"""Logging configuration and setup."""

import json
import logging
import sys
import traceback
import uuid
from datetime import datetime, timezone
from pathlib import Path

from custom_order_tables.config.settings import settings

LOG_LEVEL = settings.log_level.upper()

# Session ID (for distinguishing multiple process starts on same day)
SESSION_ID = str(uuid.uuid4())[:8]


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON (UTC)."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        # Add extra fields if present
        if hasattr(record, "order_id"):
            log_data["order_id"] = record.order_id

        return json.dumps(log_data, default=str)


# Configure package logger once
package_logger = logging.getLogger("custom_order_tables")
package_logger.setLevel(logging.DEBUG)

# Skip if already configured
if not package_logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    console_handler.setFormatter(JSONFormatter())
    package_logger.addHandler(console_handler)

    # File handler only when a log directory is configured
    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        file_handler = logging.FileHandler(log_dir / f"orders_{log_date}_{SESSION_ID}.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        package_logger.addHandler(file_handler)


def setup_logger(name: str) -> logging.Logger:
    """Get logger for a module."""
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


