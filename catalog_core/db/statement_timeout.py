"""
Per-operation deadlines for store access.

PostgreSQL enforces the deadline server side through a transaction-local
``statement_timeout``. SQLite has no such setting, so a progress handler
interrupts the running statement once the deadline passes. Either way the
driver raises ``OperationalError``, which is translated into
``StorageTimeoutError`` here.
"""

import time
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from ..exceptions import StorageTimeoutError

# SQLite VM instructions between deadline checks
SQLITE_PROGRESS_INTERVAL = 1000

_TIMEOUT_MARKERS = ("statement timeout", "canceling statement", "interrupted")


def _is_timeout(error: OperationalError) -> bool:
    message = str(getattr(error, "orig", error)).lower()
    return any(marker in message for marker in _TIMEOUT_MARKERS)


@contextmanager
def statement_deadline(session: Session, seconds: float) -> Generator[None, None, None]:
    """
    Bound every statement issued inside the block by ``seconds``.

    Raises:
        StorageTimeoutError: If the store cancelled a statement because the deadline elapsed
    """
    deadline = time.monotonic() + seconds
    dialect = session.get_bind().dialect.name
    raw_connection = None

    if dialect == "postgresql":
        session.execute(
            text("SELECT set_config('statement_timeout', :ms, true)"),
            {"ms": str(max(1, int(seconds * 1000)))},
        )
    elif dialect == "sqlite":
        raw_connection = session.connection().connection.driver_connection
        raw_connection.set_progress_handler(
            lambda: 1 if time.monotonic() > deadline else 0, SQLITE_PROGRESS_INTERVAL
        )

    try:
        yield
    except OperationalError as e:
        if _is_timeout(e) or time.monotonic() > deadline:
            raise StorageTimeoutError(
                f"Database operation exceeded its {seconds}s deadline",
                cause=e,
                timeout_seconds=seconds,
            ) from e
        raise
    finally:
        if raw_connection is not None:
            raw_connection.set_progress_handler(None, 0)
