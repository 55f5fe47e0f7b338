"""
kassa/core/logging.py

Purpose: Logging configuration

- Standardizes log format
- Controls log levels
- JSON logs in production, coloured console logs in development
- Context tracking (user_id, product_id, transaction_id, chat_id)
"""

import logging
import sys
import json
from datetime import datetime
from kassa.core.config import settings


# Record attributes copied into log output when a LogContext (or extra=) sets them
CONTEXT_FIELDS = ("user_id", "product_id", "transaction_id", "chat_id", "report")


def _context(record: logging.LogRecord) -> dict:
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class StructuredFormatter(logging.Formatter):
    """
    Formatter for structured JSON logging in production.
    One JSON object per line so log shippers can parse it.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        log_data.update(_context(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """
    Human-readable formatter for development environment.
    """

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        message = f"{color}[{timestamp}] {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"

        context = _context(record)
        if context:
            message += " [" + ", ".join(f"{key}={value}" for key, value in context.items()) + "]"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging():
    """
    Configures application-wide logging.
    Uses JSON format in production, human-readable otherwise.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if settings.is_production:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Set third-party loggers to WARNING to reduce noise
    for noisy in ("motor", "pymongo", "multipart", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger("kassa")
    logger.info(
        f"Logging configured (environment={settings.ENVIRONMENT}, level={settings.LOG_LEVEL})"
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the application namespace.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    if name == "kassa" or name.startswith("kassa."):
        return logging.getLogger(name)
    return logging.getLogger(f"kassa.{name}")


class LogContext:
    """
    Context manager for adding structured context to logs.

    Usage:
        with LogContext(user_id="123", transaction_id="abc"):
            logger.info("Recording payment")
    """

    def __init__(self, **kwargs):
        self.context = kwargs
        self._old_factory = None

    def __enter__(self):
        self._old_factory = logging.getLogRecordFactory()

        def record_factory(*args, **kwargs):
            record = self._old_factory(*args, **kwargs)
            for key, value in self.context.items():
                setattr(record, key, value)
            return record

        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        logging.setLogRecordFactory(self._old_factory)
