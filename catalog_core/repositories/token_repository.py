"""
Token storage.

Lookups go by the SHA-256 digest of the presented text; scope and expiry are
checked by the database in the same statement.
"""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..auth.token_codec import hash_token
from ..db.db_base import utc_now
from ..db.db_token_models import Token
from ..db.db_user_models import User
from ..enums import TokenScope
from ..exceptions import ConflictError, ErrorCode, NotFoundError, RepositoryError
from .base_repository import BaseRepository


class TokenRepository(BaseRepository[Token]):
    """Repository for hashed, scoped tokens."""

    def __init__(self, session: Session, timeout_seconds: Optional[float] = None):
        super().__init__(session, Token, timeout_seconds=timeout_seconds)

    def insert(self, token: Token) -> Token:
        """
        Persist a freshly generated token.

        Raises:
            ConflictError: If the digest collides with a stored token; retry with a new token
        """
        try:
            with self._session_operation("insert_token"):
                self.session.add(token)
        except RepositoryError as e:
            if e.error_code == ErrorCode.DUPLICATE:
                raise ConflictError(
                    "token collision, please try again", cause=e, scope=token.scope
                ) from e
            raise

        self.logger.debug(
            "Token stored", extra={"user_id": token.user_id, "scope": token.scope}
        )
        return token

    def get_user_for_token(self, scope: TokenScope, plaintext: str) -> User:
        """
        Resolve token text to its owner.

        Raises:
            NotFoundError: If no unexpired token of ``scope`` has this digest. The
                error is the same whether the token is unknown, expired or of
                another scope.
        """
        query = (
            select(User)
            .join(Token, Token.user_id == User.id)
            .where(
                Token.hash == hash_token(plaintext),
                Token.scope == scope.value,
                Token.expires_at > utc_now(),
            )
        )

        with self._session_operation("get_user_for_token", is_read_only=True):
            user = self.session.execute(query).scalar_one_or_none()

        if user is None:
            raise NotFoundError("Token not found", resource_type="Token")
        return user

    def delete_all_for_user(self, scope: TokenScope, user_id: int) -> int:
        """Remove every token of ``scope`` owned by ``user_id``; returns how many went."""
        query = (
            delete(Token)
            .where(Token.user_id == user_id, Token.scope == scope.value)
            .execution_options(synchronize_session="fetch")
        )
        with self._session_operation("delete_all_tokens_for_user", user_id):
            result = self.session.execute(query)

        self.logger.info(
            "Deleted tokens for user",
            extra={"user_id": user_id, "scope": scope.value, "deleted_count": result.rowcount},
        )
        return result.rowcount

    def delete_expired(self) -> int:
        """Purge tokens whose expiry has passed."""
        query = (
            delete(Token)
            .where(Token.expires_at <= utc_now())
            .execution_options(synchronize_session=False)
        )
        with self._session_operation("delete_expired_tokens"):
            result = self.session.execute(query)

        if result.rowcount:
            self.logger.info(
                "Purged expired tokens", extra={"deleted_count": result.rowcount}
            )
        return result.rowcount
