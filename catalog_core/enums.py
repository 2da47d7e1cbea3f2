"""
Enums used across the catalog_core package.

Kept separate from the models so that schemas, repositories and the query
layer can share them without circular imports.
"""

import enum


class TokenScope(str, enum.Enum):
    """Purpose a token was issued for; one scope can never stand in for another."""

    AUTHENTICATION = "authentication"
    ACTIVATION = "activation"


class SortDirection(str, enum.Enum):
    """Ordering direction for a validated sort column."""

    ASC = "ASC"
    DESC = "DESC"
