"""
Structured logging utilities for application logging
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

ROOT_LOGGER_NAME = "healthvoice"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StructuredLogger:
    """
    Structured logger that writes one JSON-encoded event per call.

    Handlers come from ``configure_logging``; events propagate to the
    ``healthvoice`` root logger.
    """

    def __init__(self, name: str):
        if not name.startswith(ROOT_LOGGER_NAME):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self.logger = logging.getLogger(name)

    def log(self, level: str, message: str, **kwargs: Any) -> None:
        """Log with structured data"""
        log_data: Dict[str, Any] = {"message": message, **kwargs}
        self.logger.log(
            logging.getLevelName(level.upper()), json.dumps(log_data, default=str)
        )

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("info", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("warning", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("error", message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("debug", message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self.log("critical", message, **kwargs)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            log_obj["request_id"] = request_id

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


def configure_logging(level: str = "INFO", fmt: str = "json") -> logging.Logger:
    """Install a single stdout handler on the ``healthvoice`` logger.

    Safe to call more than once; the previous handler is replaced.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    return root


def get_logger(name: str) -> StructuredLogger:
    """Get or create a structured logger"""
    return StructuredLogger(name)
