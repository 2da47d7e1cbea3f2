"""Services: transaction boundaries around repositories."""

from .base_service import SessionManagedService
from .book_service import BookService
from .token_service import TokenService
from .user_service import UserService

__all__ = [
    "BookService",
    "SessionManagedService",
    "TokenService",
    "UserService",
]
