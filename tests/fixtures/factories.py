"""
Factory Boy factories for generating consistent test data.
"""

import factory

from catalog_core.auth.passwords import hash_password
from catalog_core.db import Book, User

DEFAULT_PASSWORD = "pa55word-for-tests"

# argon2 is deliberately slow; hash once for every factory-built user
_DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Base factory with common patterns."""

    class Meta:
        abstract = True
        sqlalchemy_session_persistence = "flush"


class UserFactory(BaseFactory):
    """Factory for registered, not yet activated users."""

    class Meta:
        model = User

    name = factory.Faker("name")
    email = factory.Sequence(lambda n: f"reader{n}@example.com")
    password_hash = _DEFAULT_PASSWORD_HASH
    activated = False


class BookFactory(BaseFactory):
    """Factory for catalog records."""

    class Meta:
        model = Book

    title = factory.Sequence(lambda n: f"Book {n:04d}")
    author = factory.Faker("name")
    published_year = factory.Faker("pyint", min_value=1900, max_value=2025)


def configure_factories(session):
    """Configure all factories to use the provided session."""
    for factory_class in [UserFactory, BookFactory]:
        factory_class._meta.sqlalchemy_session = session
