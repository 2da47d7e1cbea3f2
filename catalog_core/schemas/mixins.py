"""
Common Pydantic schema mixins.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ErrorCode, ValidationError

_TYPE_ERROR_SUFFIXES = ("_type", "_parsing")


class ClientInputMixin(BaseModel):
    """
    Base for schemas built from client input.

    Structural failures reported by pydantic (missing fields, wrong types)
    are re-raised as ``catalog_core.exceptions.ValidationError`` naming the
    first offending field, the same error the field validators raise. The
    rejected value is never copied into the error.
    """

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="wrap")
    @classmethod
    def raise_as_validation_error(cls, data: Any, handler: Any) -> Any:
        try:
            return handler(data)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None

            if first["type"] == "missing":
                message, error_code = "must be provided", ErrorCode.MISSING_REQUIRED
            elif first["type"].endswith(_TYPE_ERROR_SUFFIXES):
                message, error_code = first["msg"], ErrorCode.TYPE_MISMATCH
            else:
                message, error_code = first["msg"], ErrorCode.VALIDATION_FAILED

            # pydantic messages embed the input value, so the chain stops here
            raise ValidationError(message, field=field, error_code=error_code) from None
