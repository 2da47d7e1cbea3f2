"""
Token issuance and resolution.
"""

from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..auth.token_codec import generate_token
from ..config import AuthConfig, get_config
from ..context.operation_context import operation
from ..enums import TokenScope
from ..repositories.token_repository import TokenRepository
from ..schemas.token_schema import IssuedToken
from ..schemas.user_schema import UserRead
from .base_service import SessionManagedService


class TokenService(SessionManagedService):
    """Issues tokens and resolves presented tokens to users."""

    def __init__(
        self,
        session: Optional[Session] = None,
        config: Optional[AuthConfig] = None,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__(session=session)
        self.config = config or get_config().auth
        self.repository = TokenRepository(self.session, timeout_seconds=timeout_seconds)

    @operation()
    def issue_token(self, user_id: int, ttl: timedelta, scope: TokenScope) -> IssuedToken:
        """
        Mint and store a token; the returned plaintext exists nowhere else.

        Raises:
            TokenGenerationError: If no randomness is available
            ConflictError: On a digest collision (retry)
        """
        plaintext, token = generate_token(user_id, ttl, scope, self.config.token_bytes)
        expires_at = token.expires_at

        with self.transaction():
            self.repository.insert(token)

        return IssuedToken(token=plaintext, scope=scope, expires_at=expires_at)

    def issue_activation_token(self, user_id: int) -> IssuedToken:
        ttl = timedelta(hours=self.config.activation_token_ttl_hours)
        return self.issue_token(user_id, ttl, TokenScope.ACTIVATION)

    def issue_authentication_token(self, user_id: int) -> IssuedToken:
        ttl = timedelta(hours=self.config.authentication_token_ttl_hours)
        return self.issue_token(user_id, ttl, TokenScope.AUTHENTICATION)

    @operation()
    def resolve_user(self, scope: TokenScope, plaintext: str) -> UserRead:
        """
        Raises:
            NotFoundError: For any token that does not resolve, whatever the reason
        """
        with self.transaction():
            user = self.repository.get_user_for_token(scope, plaintext)
            return UserRead.model_validate(user)

    @operation()
    def delete_all_for_user(self, scope: TokenScope, user_id: int) -> int:
        with self.transaction():
            return self.repository.delete_all_for_user(scope, user_id)

    @operation()
    def delete_expired(self) -> int:
        with self.transaction():
            return self.repository.delete_expired()
