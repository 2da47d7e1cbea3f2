"""Utility modules for the catalog core."""

from .json_utils import dumps, loads
from .logger import (
    ContextAwareLogger,
    CorrelationIdFilter,
    JsonLogFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)

__all__ = [
    "dumps",
    "loads",
    "ContextAwareLogger",
    "CorrelationIdFilter",
    "JsonLogFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]
