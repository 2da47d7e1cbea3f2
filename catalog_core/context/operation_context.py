"""
Operation context for service calls.

Every decorated service method gets an ENTER record, then an EXIT record
carrying its duration and outcome. Client-caused failures are logged at
INFO since the error has already logged itself as a warning; store faults
and unexpected exceptions at ERROR.
"""

import time
import uuid
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Dict, Generator, Optional, TypeVar, Union, cast

from ..exceptions import BaseError, get_correlation_id, set_correlation_id
from ..utils.logger import ContextAwareLogger, get_logger
from .subject_context import SubjectContext


class OperationContext:
    """Identity and timing of one service call."""

    def __init__(self, operation_name: str, correlation_id: Optional[str] = None):
        self.operation_name = operation_name
        self.operation_id = str(uuid.uuid4())

        # Calls made while handling one request share its correlation id
        self.correlation_id = correlation_id or get_correlation_id() or str(uuid.uuid4())
        set_correlation_id(self.correlation_id)

        self.subject_id = SubjectContext.get_current_subject_id()
        self.start_time = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        return (time.perf_counter() - self.start_time) * 1000

    def log_fields(self, **extra: Any) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "operation_id": self.operation_id,
            "correlation_id": self.correlation_id,
        }
        if self.subject_id is not None:
            fields["subject_id"] = self.subject_id
        fields.update(extra)
        return fields


@contextmanager
def operation_scope(
    name: str, logger: Optional[ContextAwareLogger] = None
) -> Generator[OperationContext, None, None]:
    """
    Log entry and exit of ``name`` around the block.

    ``BaseError``s raised inside the block are tagged with the operation
    name, id and duration before they propagate.
    """
    logger = logger if logger is not None else get_logger()
    op_ctx = OperationContext(name)

    logger.info(f"ENTER: {name}", extra=op_ctx.log_fields())
    try:
        yield op_ctx
    except BaseError as e:
        e.add_context(
            operation_name=name,
            operation_id=op_ctx.operation_id,
            operation_duration_ms=op_ctx.duration_ms,
        )
        log = logger.error if e.is_server_fault else logger.info
        log(
            f"ERROR: {name} -> {e.error_code.value}",
            extra=op_ctx.log_fields(
                duration_ms=op_ctx.duration_ms,
                error_id=e.error_id,
                error_code=e.error_code.value,
                status="error",
            ),
        )
        raise
    except Exception as e:
        logger.exception(
            f"ERROR: {name} -> {type(e).__name__}",
            extra=op_ctx.log_fields(
                duration_ms=op_ctx.duration_ms,
                error_type=type(e).__name__,
                status="error",
            ),
        )
        raise

    logger.info(
        f"EXIT: {name}",
        extra=op_ctx.log_fields(duration_ms=op_ctx.duration_ms, status="success"),
    )


F = TypeVar("F", bound=Callable[..., Any])


def operation(name: Union[Optional[str], Callable] = None):
    """
    Decorator that runs a service method inside ``operation_scope``.

    Arguments and return values are never logged: they routinely carry
    token plaintexts and passwords.

    Args:
        name: Operation name; defaults to ``<module>.<Class>.<method>``
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            op_name = name
            if op_name is None:
                owner = f"{type(args[0]).__name__}." if args else ""
                op_name = f"{func.__module__.split('.')[-1]}.{owner}{func.__name__}"

            with operation_scope(op_name):
                return func(*args, **kwargs)

        return cast(F, wrapper)

    # Bare @operation
    if callable(name):
        func, name = name, None
        return decorator(func)

    return decorator
