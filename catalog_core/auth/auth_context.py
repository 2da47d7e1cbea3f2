"""
Bearer-token authentication of incoming requests.

Every way a presented credential can fail (malformed, unknown, expired,
issued for another scope) surfaces as the same ``InvalidCredentialError``.
"""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Generator, Mapping, Optional

from ..config import get_config
from ..context.subject_context import subject_context
from ..enums import TokenScope
from ..exceptions import InvalidCredentialError, MissingCredentialError, NotFoundError, ValidationError
from ..schemas.user_schema import UserRead
from .token_codec import validate_token_plaintext

if TYPE_CHECKING:
    from ..services.token_service import TokenService

AUTHORIZATION_HEADER = "authorization"
BEARER_SCHEME = "Bearer"


class AuthContext:
    """Turns request headers into the authenticated user."""

    def __init__(self, token_service: "TokenService", token_bytes: Optional[int] = None):
        self.token_service = token_service
        self.token_bytes = token_bytes if token_bytes is not None else get_config().auth.token_bytes

    @staticmethod
    def extract_bearer_token(headers: Mapping[str, str]) -> str:
        """
        Pull the token out of an ``Authorization: Bearer <token>`` header.

        Header names are matched case-insensitively.

        Raises:
            MissingCredentialError: If the header is absent or not a bearer credential
        """
        value = ""
        for name, header_value in headers.items():
            if name.lower() == AUTHORIZATION_HEADER:
                value = header_value
                break

        parts = value.split(" ")
        if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
            raise MissingCredentialError()
        return parts[1]

    def authenticate(self, headers: Mapping[str, str]) -> UserRead:
        """
        Resolve the request's bearer token to its user.

        Raises:
            MissingCredentialError: No bearer credential was presented
            InvalidCredentialError: The credential does not resolve to a user
        """
        plaintext = self.extract_bearer_token(headers)
        try:
            validate_token_plaintext(plaintext, self.token_bytes)
            return self.token_service.resolve_user(TokenScope.AUTHENTICATION, plaintext)
        except (ValidationError, NotFoundError) as e:
            raise InvalidCredentialError(cause=e) from e

    @contextmanager
    def authenticated(self, headers: Mapping[str, str]) -> Generator[UserRead, None, None]:
        """Authenticate, then run the block with the user as the current subject."""
        subject = self.authenticate(headers)
        with subject_context(subject):
            yield subject
