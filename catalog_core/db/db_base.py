"""
Shared column definitions for the catalog models.

Kept free of business logic; timestamps are always stored in UTC.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer


def utc_now():
    """Return current UTC time with timezone info attached."""
    return datetime.now(UTC)


class TimestampMixin:
    """Simple mixin for created_at/updated_at timestamps."""

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)


class VersionMixin:
    """Optimistic concurrency token; bumped by every successful update."""

    version = Column(Integer, nullable=False, default=1)
