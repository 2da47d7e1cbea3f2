"""Context management for operations and the authenticated subject."""

from .operation_context import OperationContext, operation, operation_scope
from .subject_context import SubjectContext, requires_subject, subject_context

__all__ = [
    "operation",
    "operation_scope",
    "OperationContext",
    "SubjectContext",
    "requires_subject",
    "subject_context",
]
