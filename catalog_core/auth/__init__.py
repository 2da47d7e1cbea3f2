"""Token minting, password hashing and request authentication."""

from .passwords import burn_verification, hash_password, verify_password
from .token_codec import generate_token, hash_token, plaintext_length, validate_token_plaintext
from .auth_context import AuthContext  # noqa: I100 (needs token_codec loaded first)

__all__ = [
    "AuthContext",
    "burn_verification",
    "generate_token",
    "hash_password",
    "hash_token",
    "plaintext_length",
    "validate_token_plaintext",
    "verify_password",
]
