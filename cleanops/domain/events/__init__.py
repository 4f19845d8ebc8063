"""
Domain events package.
"""

from typing import Union

from .invoice_events import InvoiceApproved, InvoicePaid, InvoiceSubmitted, LineItemVoided
from .job_events import (
    AccessDenied,
    ConflictResolved,
    JobAccepted,
    JobAvailable,
    JobCompleted,
    JobNeedsReview,
    JobOverrideCompleted,
    JobReassigned,
    JobReset,
    JobStarted,
)

DomainEvent = Union[
    JobAvailable,
    JobAccepted,
    JobStarted,
    JobCompleted,
    JobNeedsReview,
    JobReassigned,
    JobReset,
    AccessDenied,
    JobOverrideCompleted,
    ConflictResolved,
    InvoiceSubmitted,
    InvoiceApproved,
    InvoicePaid,
    LineItemVoided,
]

__all__ = [
    "AccessDenied",
    "ConflictResolved",
    "DomainEvent",
    "InvoiceApproved",
    "InvoicePaid",
    "InvoiceSubmitted",
    "JobAccepted",
    "JobAvailable",
    "JobCompleted",
    "JobNeedsReview",
    "JobOverrideCompleted",
    "JobReassigned",
    "JobReset",
    "JobStarted",
    "LineItemVoided",
]
