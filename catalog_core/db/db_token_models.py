"""
Token model.

Only the SHA-256 digest of a token is persisted; the plaintext never
reaches the database.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, LargeBinary, String
from sqlalchemy.orm import relationship

from .db_config import Base


class Token(Base):
    """Hashed, scoped, expiring credential keyed by its digest."""

    __tablename__ = "tokens"

    hash = Column(LargeBinary(32), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    scope = Column(String(32), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    user = relationship("User", back_populates="tokens")

    __table_args__ = (Index("ix_tokens_user_scope", "user_id", "scope"),)
