"""
Validation schemas package.

These schemas define the shape of data crossing the service boundary.
"""

from .book_schema import BookCreate, BookPage, BookRead, BookUpdate
from .mixins import ClientInputMixin
from .pagination_schema import Filters, ListingParams, Metadata
from .token_schema import IssuedToken
from .user_schema import RegistrationResult, UserCreate, UserLogin, UserRead

__all__ = [
    "BookCreate",
    "BookPage",
    "BookRead",
    "BookUpdate",
    "ClientInputMixin",
    "Filters",
    "IssuedToken",
    "ListingParams",
    "Metadata",
    "RegistrationResult",
    "UserCreate",
    "UserLogin",
    "UserRead",
]
