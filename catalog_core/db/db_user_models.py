"""
User model.

Just the data structure - password hashing and token handling live in
the auth package.
"""

from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.orm import relationship

from .db_base import TimestampMixin, VersionMixin
from .db_config import Base


class User(Base, TimestampMixin, VersionMixin):
    """Registered account; ``email`` is stored lower-cased and is unique."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    activated = Column(Boolean, nullable=False, default=False)

    tokens = relationship(
        "Token", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
