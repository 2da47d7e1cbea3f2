"""
Logging for the catalog core.

This module provides:
1. ContextAwareLogger for console logs (with pipe-delimited extras)
2. CorrelationIdFilter that stamps correlation and subject ids on records
3. JsonLogFormatter for structured one-line JSON output
"""

import logging
import sys
import traceback
from datetime import datetime
from typing import Optional, Union

from ..config import get_config
from .json_utils import dumps

_function_logger = None

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED_RECORD_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "correlation_id",
        "subject_id",
    ]
)


# Extras under these keys are masked before they reach any handler
REDACTED_EXTRA_KEYS = frozenset(["token", "plaintext", "password", "password_hash", "authorization"])


class ContextAwareLogger:
    """
    Logger wrapper that formats extra attributes into the message while
    preserving them on the record for structured handlers.

    Extras named in ``REDACTED_EXTRA_KEYS`` are replaced with ``***``.
    """

    def __init__(self, logger):
        self.logger = logger

    def _log_with_formatted_extra(self, level, msg, **kwargs):
        extra = {
            key: "***" if key.lower() in REDACTED_EXTRA_KEYS else value
            for key, value in (kwargs.pop("extra", None) or {}).items()
        }

        if extra:
            extra_str = " | ".join(f"{k}={v}" for k, v in extra.items())
            msg = f"{msg} | {extra_str}"

        getattr(self.logger, level)(msg, extra=extra, **kwargs)

    def set_level(self, level):
        """Set the logging level of the underlying logger."""
        self.logger.setLevel(level)

    def info(self, msg, **kwargs):
        """Log at INFO level with formatted extra."""
        self._log_with_formatted_extra("info", msg, **kwargs)

    def error(self, msg, **kwargs):
        """Log at ERROR level with formatted extra."""
        self._log_with_formatted_extra("error", msg, **kwargs)

    def warning(self, msg, **kwargs):
        """Log at WARNING level with formatted extra."""
        self._log_with_formatted_extra("warning", msg, **kwargs)

    def debug(self, msg, **kwargs):
        """Log at DEBUG level with formatted extra."""
        self._log_with_formatted_extra("debug", msg, **kwargs)

    def exception(self, msg, **kwargs):
        """Log exception with formatted extra."""
        self._log_with_formatted_extra("exception", msg, **kwargs)


class CorrelationIdFilter(logging.Filter):
    """
    Logging filter that adds correlation and subject ids to log records.
    """

    def filter(self, record):
        """
        Add correlation_id and subject_id to the record when they are set.

        Args:
            record: LogRecord to modify

        Returns:
            True to include the record in the log output
        """
        # Lazy imports to avoid circular dependency
        from ..context.subject_context import SubjectContext
        from ..exceptions import get_correlation_id

        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id

        subject_id = SubjectContext.get_current_subject_id()
        if subject_id is not None:
            record.subject_id = subject_id

        return True


class JsonLogFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for field in ["correlation_id", "subject_id"]:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS and not key.startswith("_") and not callable(value)
        }
        if context:
            log_entry["context"] = context

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": [
                    line.rstrip() for line in traceback.format_exception(*record.exc_info)
                ],
            }

        return dumps(log_entry)


def configure_logging(
    service_name: str,
    log_level: Optional[Union[int, str]] = None,
    enable_json: Optional[bool] = None,
) -> "ContextAwareLogger":
    """
    Configure console logging for a service.

    Args:
        service_name: Name used for the logger (``catalog.<service_name>``)
        log_level: Logging level (default: from config.logging.level)
        enable_json: Emit JSON lines instead of plain messages
            (default: from config.logging.enable_json_logs)

    Returns:
        The configured logger wrapped with ContextAwareLogger
    """
    global _function_logger

    app_config = get_config()

    if log_level is None:
        log_level = app_config.logging.level
    if enable_json is None:
        enable_json = app_config.logging.enable_json_logs

    if isinstance(log_level, str):
        log_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(f"catalog.{service_name}")
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    if enable_json:
        console_handler.setFormatter(JsonLogFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(app_config.logging.format))
    console_handler.addFilter(CorrelationIdFilter())
    logger.addHandler(console_handler)

    wrapped_logger = ContextAwareLogger(logger)

    wrapped_logger.info(
        "Service logger configured",
        extra={"service_name": service_name, "json_logs": enable_json},
    )
    _function_logger = wrapped_logger
    return wrapped_logger


def reset_logging() -> None:
    """Forget the configured service logger; get_logger falls back to the root logger."""
    global _function_logger
    _function_logger = None


def get_logger(
    log_level: Optional[Union[int, str]] = None,
) -> "ContextAwareLogger":
    """
    Get the service logger.

    Args:
        log_level: Optional log level to set

    Returns:
        Logger instance
    """
    if _function_logger is not None:
        return _function_logger

    logger = logging.getLogger()

    if log_level is None:
        log_level = get_config().logging.level

    if isinstance(log_level, str):
        log_level = getattr(logging, log_level.upper(), logging.INFO)
    logger.setLevel(log_level)

    return ContextAwareLogger(logger)
