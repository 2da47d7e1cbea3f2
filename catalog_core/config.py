"""
Configuration for the catalog core.

Every section reads its defaults from environment variables when it is
constructed, so ``AppConfig()`` reflects the process environment and tests
can override single values by passing them explicitly.
"""

import os
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

from .constants import EnvironmentVariable, Limits, LogLevel, Timeouts, TokenLifetimes

V = TypeVar("V")


def _from_env(variable: EnvironmentVariable, default: V, parse: Callable[[str], V] = str):
    """Default factory reading ``variable``, falling back to ``default`` when unset."""

    def factory() -> V:
        raw = os.getenv(variable.value)
        return default if raw is None else parse(raw)

    return factory


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


class DatabaseConfig(BaseModel):
    """Connection settings; the URL scheme selects PostgreSQL or SQLite."""

    connection_string: str = Field(
        default_factory=_from_env(EnvironmentVariable.DATABASE_URL, "sqlite:///./catalog.db"),
        description="SQLAlchemy database URL",
    )
    pool_size: int = Field(default=5, gt=0)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout: int = Field(default=Timeouts.DATABASE_POOL, gt=0)
    echo: bool = Field(
        default_factory=_from_env(EnvironmentVariable.DB_ECHO, False, _parse_bool),
        description="Echo SQL statements",
    )
    development_mode: bool = Field(
        default=False, description="Allow destructive schema operations such as drop_tables"
    )


class LoggingConfig(BaseModel):
    level: str = Field(
        default_factory=_from_env(EnvironmentVariable.LOG_LEVEL, LogLevel.INFO.value),
        validate_default=True,
    )
    format: str = Field(default="%(message)s", description="Format for plain-text log lines")
    enable_json_logs: bool = Field(
        default_factory=_from_env(EnvironmentVariable.LOG_JSON, False, _parse_bool),
        description="Emit one JSON object per log line",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class AuthConfig(BaseModel):
    """Token issuance settings."""

    token_bytes: int = Field(
        default=Limits.TOKEN_BYTES, ge=16, description="Random bytes per issued token"
    )
    activation_token_ttl_hours: int = Field(
        default_factory=_from_env(
            EnvironmentVariable.ACTIVATION_TOKEN_TTL_HOURS, TokenLifetimes.ACTIVATION_HOURS, int
        ),
        gt=0,
    )
    authentication_token_ttl_hours: int = Field(
        default_factory=_from_env(
            EnvironmentVariable.AUTHENTICATION_TOKEN_TTL_HOURS,
            TokenLifetimes.AUTHENTICATION_HOURS,
            int,
        ),
        gt=0,
    )


class QueryConfig(BaseModel):
    """Listing and store-access limits."""

    default_page_size: int = Field(default=Limits.DEFAULT_PAGE_SIZE, gt=0)
    max_page_size: int = Field(
        default_factory=_from_env(EnvironmentVariable.MAX_PAGE_SIZE, Limits.MAX_PAGE_SIZE, int),
        gt=0,
        description="Upper bound for page_size",
    )
    store_timeout_seconds: float = Field(
        default_factory=_from_env(
            EnvironmentVariable.STORE_TIMEOUT_SECONDS, float(Timeouts.STORE_OPERATION), float
        ),
        gt=0,
        description="Deadline applied to every store statement",
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance, loading it from the environment on first use."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    global _config
    _config = config


def reset_config() -> None:
    """Forget the global configuration; the next get_config re-reads the environment."""
    global _config
    _config = None
