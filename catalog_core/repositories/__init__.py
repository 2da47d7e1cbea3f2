"""Repositories: session-bound data access, no transaction control."""

from .base_repository import BaseRepository
from .book_repository import BookRepository
from .token_repository import TokenRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookRepository",
    "TokenRepository",
    "UserRepository",
]
