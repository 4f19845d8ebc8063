"""
Job lifecycle domain events.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID


@dataclass(frozen=True)
class JobAvailable:
    """Event raised when a new job is posted for cleaners to pick up."""

    job_id: UUID
    business_id: UUID
    property_id: UUID
    price: Decimal
    occurred_at: datetime


@dataclass(frozen=True)
class JobAccepted:
    """Event raised when a cleaner wins an available job."""

    job_id: UUID
    business_id: UUID
    cleaner_id: UUID
    occurred_at: datetime


@dataclass(frozen=True)
class JobStarted:
    """Event raised when the assigned cleaner starts working."""

    job_id: UUID
    business_id: UUID
    cleaner_id: UUID
    occurred_at: datetime


@dataclass(frozen=True)
class JobCompleted:
    """Event raised when a job is completed and accrued to an invoice."""

    job_id: UUID
    business_id: UUID
    cleaner_id: UUID
    occurred_at: datetime
    invoice_id: Optional[UUID] = None
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class JobNeedsReview:
    """Event raised when completion produced conflicts."""

    job_id: UUID
    business_id: UUID
    cleaner_id: UUID
    conflicts: Tuple[str, ...]
    occurred_at: datetime


@dataclass(frozen=True)
class JobReassigned:
    """Event raised when a manager changes who holds a job."""

    job_id: UUID
    business_id: UUID
    manager_id: UUID
    previous_cleaner_id: Optional[UUID]
    new_cleaner_id: Optional[UUID]
    occurred_at: datetime


@dataclass(frozen=True)
class JobReset:
    """Event raised when a reviewed job is put back on the board."""

    job_id: UUID
    business_id: UUID
    manager_id: UUID
    previous_cleaner_id: Optional[UUID]
    occurred_at: datetime


@dataclass(frozen=True)
class AccessDenied:
    """Event raised when a cleaner cannot get into the property."""

    job_id: UUID
    business_id: UUID
    cleaner_id: UUID
    occurred_at: datetime


@dataclass(frozen=True)
class JobOverrideCompleted:
    """Event raised when a manager force-completes a job under review."""

    job_id: UUID
    business_id: UUID
    manager_id: UUID
    cleaner_id: UUID
    reason: str
    conflicts_resolved: Tuple[str, ...]
    occurred_at: datetime


@dataclass(frozen=True)
class ConflictResolved:
    """Event raised when a manager resolves one kind of conflict."""

    job_id: UUID
    business_id: UUID
    manager_id: UUID
    cleaner_id: UUID
    conflict_type: str
    remaining_conflicts: Tuple[str, ...]
    occurred_at: datetime
