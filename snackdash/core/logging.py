"""Structured logging configuration."""
import logging
import sys
import json
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional


# Per-request correlation id, set by the HTTP middleware in main
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

EXTRA_FIELDS = ("tenant_id", "order_id", "product_id", "request_id", "scope")


class RequestContextFilter(logging.Filter):
    """Stamp records with the current request id, if any."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            request_id = request_id_var.get()
            if request_id:
                record.request_id = request_id
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line; domain ids ride along as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(
            {field: getattr(record, field) for field in EXTRA_FIELDS if hasattr(record, field)}
        )
        return json.dumps(log_data, default=str)


def setup_logging(debug: bool = False) -> None:
    """Configure structured logging for the application."""
    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(JSONFormatter())
    console_handler.addFilter(RequestContextFilter())
    root_logger.addHandler(console_handler)

    # Third-party chatter
    for name, quiet_level in (
        ("uvicorn.access", logging.WARNING),
        ("sqlalchemy.engine", logging.WARNING),
        ("aiosqlite", logging.WARNING),
        ("httpx", logging.WARNING),
        ("passlib", logging.ERROR),
    ):
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
