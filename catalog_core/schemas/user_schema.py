"""
Pydantic schemas for User data transfer.

Input validation raises ``catalog_core.exceptions.ValidationError`` with the
offending field named, so callers get the same error type from schemas as
from services.
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import Limits
from ..exceptions import validation_failed
from .mixins import ClientInputMixin
from .token_schema import IssuedToken

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


def normalize_email(value: str) -> str:
    """Trim and lower-case an address; stored addresses compare case-insensitively."""
    return value.strip().lower()


def _check_email(v: str) -> str:
    v = normalize_email(v)
    if v == "":
        raise validation_failed("email", v, "must be provided")
    if not EMAIL_PATTERN.match(v):
        raise validation_failed("email", v, "must be a valid email address")
    return v


def _check_password(v: str) -> str:
    # The rejected value is never echoed into the error context
    size = len(v.encode("utf-8"))
    if size == 0:
        raise validation_failed("password", "", "must be provided")
    if size < Limits.MIN_PASSWORD_BYTES:
        raise validation_failed("password", "", "must be at least 8 bytes long")
    if size > Limits.MAX_PASSWORD_BYTES:
        raise validation_failed("password", "", "must not be more than 72 bytes long")
    return v


class UserCreate(ClientInputMixin):
    """
    Schema for registering a new user.
    """

    name: str = Field(default="", validate_default=True)
    email: str = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True, repr=False)

    @field_validator("name")
    def validate_name(cls, v: str) -> str:
        if v == "":
            raise validation_failed("name", v, "must be provided")
        if len(v.encode("utf-8")) > Limits.MAX_NAME_BYTES:
            raise validation_failed("name", v, "must not be more than 500 bytes long")
        return v

    @field_validator("email")
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    def validate_password(cls, v: str) -> str:
        return _check_password(v)


class UserLogin(ClientInputMixin):
    """
    Credentials exchanged for an authentication token.

    Only the shape is checked here; whether they match a user is the
    service's concern.
    """

    email: str = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True, repr=False)

    @field_validator("email")
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    def validate_password(cls, v: str) -> str:
        return _check_password(v)


class UserRead(BaseModel):
    """
    Schema for reading user data. Never carries the password hash.
    """

    id: int
    name: str
    email: str
    activated: bool
    version: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class RegistrationResult(BaseModel):
    """The new user plus the activation token to deliver to them."""

    token: IssuedToken
    user: UserRead
