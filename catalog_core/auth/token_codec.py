"""
Minting and hashing of bearer tokens.

A token is ``Limits.TOKEN_BYTES`` random bytes rendered as unpadded base32.
Only the SHA-256 digest of that text is ever persisted.
"""

import base64
import hashlib
import math
import secrets
from datetime import timedelta
from typing import Tuple

from ..constants import Limits
from ..db.db_base import utc_now
from ..db.db_token_models import Token
from ..enums import TokenScope
from ..exceptions import ErrorCode, TokenGenerationError, ValidationError


def plaintext_length(token_bytes: int = Limits.TOKEN_BYTES) -> int:
    """Length of the unpadded base32 text for ``token_bytes`` random bytes."""
    return math.ceil(token_bytes * 8 / 5)


def hash_token(plaintext: str) -> bytes:
    """SHA-256 digest of the token text; this is the stored lookup key."""
    return hashlib.sha256(plaintext.encode("utf-8")).digest()


def generate_token(
    user_id: int,
    ttl: timedelta,
    scope: TokenScope,
    token_bytes: int = Limits.TOKEN_BYTES,
) -> Tuple[str, Token]:
    """
    Mint a new token for ``user_id``. Nothing is persisted.

    Args:
        user_id: Owner of the token
        ttl: Lifetime, measured from now
        scope: What the token may be used for
        token_bytes: Amount of randomness

    Returns:
        The plaintext (hand it to the client, then forget it) and the
        unsaved ``Token`` row holding its digest

    Raises:
        TokenGenerationError: If the system entropy source is unavailable
    """
    try:
        random_bytes = secrets.token_bytes(token_bytes)
    except (NotImplementedError, OSError) as e:
        raise TokenGenerationError(cause=e, scope=scope.value) from e

    plaintext = base64.b32encode(random_bytes).decode("ascii").rstrip("=")

    token = Token(
        hash=hash_token(plaintext),
        user_id=user_id,
        scope=scope.value,
        expires_at=utc_now() + ttl,
    )
    return plaintext, token


def validate_token_plaintext(plaintext: str, token_bytes: int = Limits.TOKEN_BYTES) -> None:
    """
    Reject token text that cannot possibly be valid, before any lookup.

    Raises:
        ValidationError: With ``field="token"``
    """
    expected = plaintext_length(token_bytes)
    if not plaintext:
        raise ValidationError("must be provided", field="token", error_code=ErrorCode.MISSING_REQUIRED)
    if len(plaintext) != expected:
        raise ValidationError(
            f"must be {expected} bytes long", field="token", error_code=ErrorCode.INVALID_FORMAT
        )
