"""
Password hashing with argon2id.
"""

from functools import lru_cache

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

from ..utils.logger import get_logger

_hasher = PasswordHasher(type=Type.ID)


def hash_password(plaintext: str) -> str:
    return _hasher.hash(plaintext)


def verify_password(plaintext: str, password_hash: str) -> bool:
    """
    Check a password against a stored argon2 hash.

    A mismatch and an unreadable hash both come back as False.
    """
    try:
        return _hasher.verify(password_hash, plaintext)
    except InvalidHashError:
        get_logger().warning("Stored password hash could not be parsed")
        return False
    except VerificationError:
        return False


@lru_cache(maxsize=1)
def _decoy_hash() -> str:
    return _hasher.hash("decoy password for unknown accounts")


def burn_verification(plaintext: str) -> None:
    """
    Spend one argon2 verification without a stored hash.

    Called when no account matches, so an unknown email and a wrong
    password take the same time.
    """
    verify_password(plaintext, _decoy_hash())
