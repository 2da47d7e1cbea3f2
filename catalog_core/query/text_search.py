"""
Text-match predicates for listing searches.

PostgreSQL uses its full-text search with the ``simple`` configuration.
Elsewhere every whitespace-separated term has to appear in the column,
case-insensitively. Search text is always bound, never interpolated.
"""

from sqlalchemy import and_, func, literal_column, true
from sqlalchemy.sql.elements import ColumnElement

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so they match literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def text_match(dialect_name: str, column, query: str) -> ColumnElement:
    """
    Predicate for "``column`` matches ``query``"; an empty query matches everything.

    Args:
        dialect_name: Name of the bound dialect (``session.get_bind().dialect.name``)
        column: Mapped text column
        query: Client search text
    """
    query = query.strip()
    if not query:
        return true()

    if dialect_name == "postgresql":
        config = literal_column("'simple'")
        return func.to_tsvector(config, column).op("@@")(func.plainto_tsquery(config, query))

    return and_(
        *[
            func.lower(column).like(f"%{escape_like(term.lower())}%", escape=LIKE_ESCAPE)
            for term in query.split()
        ]
    )
