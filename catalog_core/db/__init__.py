"""
SQLAlchemy models and database configuration for the catalog core.
"""

from .db_base import TimestampMixin, VersionMixin, utc_now
from .db_book_models import Book
from .db_config import (
    Base,
    DatabaseManager,
    close_db,
    get_db_manager,
    import_all_models,
    initialize_db,
    set_db_manager,
)
from .db_token_models import Token
from .db_user_models import User
from .statement_timeout import statement_deadline

__all__ = [
    # Base definitions
    "Base",
    "TimestampMixin",
    "VersionMixin",
    "utc_now",
    # Configuration
    "DatabaseManager",
    "close_db",
    "get_db_manager",
    "import_all_models",
    "initialize_db",
    "set_db_manager",
    "statement_deadline",
    # Models
    "Book",
    "Token",
    "User",
]
