"""
Constants and enums for the catalog core.

This module centralizes magic strings and limits used throughout
the package to ensure consistency and maintainability.
"""

from enum import Enum


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Environment variables read by ``catalog_core.config``."""

    DATABASE_URL = "DATABASE_URL"
    DB_ECHO = "DB_ECHO"
    LOG_LEVEL = "LOG_LEVEL"
    LOG_JSON = "LOG_JSON"
    ACTIVATION_TOKEN_TTL_HOURS = "ACTIVATION_TOKEN_TTL_HOURS"
    AUTHENTICATION_TOKEN_TTL_HOURS = "AUTHENTICATION_TOKEN_TTL_HOURS"
    STORE_TIMEOUT_SECONDS = "STORE_TIMEOUT_SECONDS"
    MAX_PAGE_SIZE = "MAX_PAGE_SIZE"


class Limits:
    """System limits and thresholds."""

    TOKEN_BYTES = 16
    DEFAULT_PAGE = 1
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100
    MAX_PAGE = 10_000_000
    MAX_TITLE_BYTES = 100
    MAX_AUTHOR_BYTES = 100
    MAX_NAME_BYTES = 500
    MIN_PASSWORD_BYTES = 8
    MAX_PASSWORD_BYTES = 72


class Timeouts:
    """Timeout values in seconds."""

    STORE_OPERATION = 3
    DATABASE_POOL = 30


class TokenLifetimes:
    """Default credential lifetimes in hours."""

    ACTIVATION_HOURS = 72
    AUTHENTICATION_HOURS = 24
