"""
User storage.
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.db_user_models import User
from ..exceptions import not_found
from ..schemas.user_schema import normalize_email
from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for registered users."""

    def __init__(self, session: Session, timeout_seconds: Optional[float] = None):
        super().__init__(session, User, timeout_seconds=timeout_seconds)

    def insert(self, user: User) -> User:
        """
        Persist a new user; ``id``, ``version`` and timestamps are filled on flush.

        Raises:
            RepositoryError: ``DUPLICATE`` if the email address is taken
        """
        user.email = normalize_email(user.email)
        with self._session_operation("insert_user"):
            self.session.add(user)

        self.logger.info("User created", extra={"user_id": user.id})
        return user

    def get_by_id(self, user_id: int) -> User:
        user = self._get_by_id(user_id)
        if user is None:
            raise not_found("User", user_id=user_id)
        return user

    def get_by_email(self, email: str) -> User:
        """
        Raises:
            NotFoundError: If no user has this address
        """
        query = select(User).where(User.email == normalize_email(email))
        with self._session_operation("get_user_by_email", is_read_only=True):
            user = self.session.execute(query).scalar_one_or_none()

        if user is None:
            raise not_found("User")
        return user

    def update(self, user_id: int, expected_version: int, **fields: Any) -> User:
        """Optimistic update; see ``BaseRepository._update_versioned``."""
        if "email" in fields:
            fields["email"] = normalize_email(fields["email"])
        return self._update_versioned(user_id, expected_version, "update_user", **fields)
