"""
Book model - the catalog record.
"""

from sqlalchemy import Column, Integer, Text

from .db_base import TimestampMixin, VersionMixin
from .db_config import Base


class Book(Base, TimestampMixin, VersionMixin):
    """Catalog record with searchable title and author."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    author = Column(Text, nullable=False, default="")
    published_year = Column(Integer, nullable=True)
