"""
Authenticated-subject context.

Holds the user resolved by AuthContext for the duration of one request,
in thread-local storage, so service methods and log records can see who
is acting without threading the user through every call.
"""

import threading
from contextlib import contextmanager
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Generator, Optional

from ..exceptions import MissingCredentialError
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..schemas.user_schema import UserRead


class SubjectContext:
    """
    Manages the current authenticated subject using thread-local storage.

    Each worker thread handles one request at a time, so nothing here is
    shared between requests.
    """

    _thread_local = threading.local()

    @classmethod
    def set_current_subject(cls, subject: "UserRead") -> None:
        """Set the authenticated subject for the execution context."""
        cls._thread_local.subject = subject
        get_logger().debug("Current subject set", extra={"subject_id": subject.id})

    @classmethod
    def get_current_subject(cls) -> Optional["UserRead"]:
        """Get the authenticated subject, or None if the request is anonymous."""
        return getattr(cls._thread_local, "subject", None)

    @classmethod
    def get_current_subject_id(cls) -> Optional[int]:
        subject = cls.get_current_subject()
        return subject.id if subject is not None else None

    @classmethod
    def clear_current_subject(cls) -> None:
        """Clear the authenticated subject from the execution context."""
        if hasattr(cls._thread_local, "subject"):
            delattr(cls._thread_local, "subject")


@contextmanager
def subject_context(subject: "UserRead") -> Generator["UserRead", None, None]:
    """
    Context manager that sets the current subject and restores the previous one afterwards.

    Args:
        subject: The authenticated user

    Yields:
        The subject
    """
    previous = SubjectContext.get_current_subject()
    SubjectContext.set_current_subject(subject)
    try:
        yield subject
    finally:
        if previous is not None:
            SubjectContext.set_current_subject(previous)
        else:
            SubjectContext.clear_current_subject()


def requires_subject(func: Callable) -> Callable:
    """
    Decorator for operations that may only run for an authenticated subject.

    Raises:
        MissingCredentialError: If no subject is set in the current context
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if SubjectContext.get_current_subject() is None:
            raise MissingCredentialError(operation=func.__name__)
        return func(*args, **kwargs)

    return wrapper
