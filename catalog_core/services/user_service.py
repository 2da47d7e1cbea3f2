"""
User registration, activation and login.
"""

from typing import Optional

from sqlalchemy.orm import Session

from ..auth.passwords import burn_verification, hash_password, verify_password
from ..auth.token_codec import validate_token_plaintext
from ..config import AuthConfig, get_config
from ..context.operation_context import operation
from ..db.db_user_models import User
from ..enums import TokenScope
from ..exceptions import (
    ErrorCode,
    InvalidCredentialError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)
from ..repositories.user_repository import UserRepository
from ..schemas.token_schema import IssuedToken
from ..schemas.user_schema import RegistrationResult, UserCreate, UserLogin, UserRead
from .base_service import SessionManagedService
from .token_service import TokenService


class UserService(SessionManagedService):
    """
    Account lifecycle. Tokens are issued on the same session, so a user and
    their first token are committed together or not at all.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        config: Optional[AuthConfig] = None,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__(session=session)
        self.config = config or get_config().auth
        self.repository = UserRepository(self.session, timeout_seconds=timeout_seconds)
        self.token_service = TokenService(
            session=self.session, config=self.config, timeout_seconds=timeout_seconds
        )

    @operation()
    def register_user(self, data: UserCreate) -> RegistrationResult:
        """
        Create an inactive user and an activation token for them.

        Raises:
            ValidationError: ``field="email"`` if the address is already registered
        """
        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            activated=False,
        )

        with self.transaction():
            try:
                self.repository.insert(user)
            except RepositoryError as e:
                if e.error_code == ErrorCode.DUPLICATE:
                    raise ValidationError(
                        "a user with this email address already exists",
                        field="email",
                        error_code=ErrorCode.DUPLICATE,
                        cause=e,
                    ) from e
                raise

            token = self.token_service.issue_activation_token(user.id)
            user_read = UserRead.model_validate(user)

        return RegistrationResult(token=token, user=user_read)

    @operation()
    def activate_user(self, token_plaintext: str) -> UserRead:
        """
        Mark the token's owner as activated and void their activation tokens.

        Raises:
            ValidationError: ``field="token"`` for a malformed, unknown or expired token
            ConflictError: If the user was modified concurrently
        """
        validate_token_plaintext(token_plaintext, self.config.token_bytes)

        with self.transaction():
            try:
                user = self.token_service.resolve_user(TokenScope.ACTIVATION, token_plaintext)
            except NotFoundError as e:
                raise ValidationError(
                    "invalid or expired activation token", field="token", cause=e
                ) from e

            updated = self.repository.update(user.id, user.version, activated=True)
            self.token_service.delete_all_for_user(TokenScope.ACTIVATION, user.id)
            user_read = UserRead.model_validate(updated)

        return user_read

    @operation()
    def create_authentication_token(self, email: str, password: str) -> IssuedToken:
        """
        Exchange an email address and password for an authentication token.

        Raises:
            ValidationError: If the credentials are malformed
            InvalidCredentialError: If they do not match a user
        """
        credentials = UserLogin(email=email, password=password)

        with self.transaction():
            try:
                user = self.repository.get_by_email(credentials.email)
            except NotFoundError as e:
                burn_verification(credentials.password)
                raise InvalidCredentialError("invalid authentication credentials", cause=e) from e

            if not verify_password(credentials.password, user.password_hash):
                self.logger.info("Password mismatch", extra={"user_id": user.id})
                raise InvalidCredentialError("invalid authentication credentials")

            return self.token_service.issue_authentication_token(user.id)

    @operation()
    def get_user(self, user_id: int) -> UserRead:
        with self.transaction():
            return UserRead.model_validate(self.repository.get_by_id(user_id))
