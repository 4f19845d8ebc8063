"""
Domain exceptions package.
"""

from .domain_error import ConflictError, DomainError, ForbiddenError, NotFoundError
from .invoice_error import ImmutabilityViolationError, InvoiceLockedError
from .transition_error import InvalidTransitionError, NoConflictToResolveError
from .validation_error import (
    InvalidCoordinatesError,
    InvalidOverrideReasonError,
    ValidationError,
)

__all__ = [
    "ConflictError",
    "DomainError",
    "ForbiddenError",
    "ImmutabilityViolationError",
    "InvalidCoordinatesError",
    "InvalidOverrideReasonError",
    "InvalidTransitionError",
    "InvoiceLockedError",
    "NoConflictToResolveError",
    "NotFoundError",
    "ValidationError",
]
