"""
Pydantic schema for a freshly issued token.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..enums import TokenScope


class IssuedToken(BaseModel):
    """
    The only value that ever carries a token plaintext out of the core.

    ``token`` is excluded from ``repr`` so that logging the object does not
    leak the secret.
    """

    token: str = Field(repr=False)
    scope: TokenScope
    expires_at: datetime
