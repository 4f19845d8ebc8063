"""
Cleaning job domain entity.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import UUID, uuid4

from cleanops.domain.exceptions.transition_error import InvalidTransitionError
from cleanops.domain.exceptions.validation_error import ValidationError
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.domain.value_objects.pay_type import PayType


@dataclass
class Job:
    """Cleaning job domain entity."""

    business_id: UUID
    property_id: UUID
    price: Decimal
    id: UUID = field(default_factory=uuid4)
    status: JobStatus = JobStatus.AVAILABLE
    assigned_cleaner_id: Optional[UUID] = None
    cleaning_date: Optional[date] = None
    instructions: Optional[str] = None
    pay_type_override: Optional[PayType] = None

    # Lifecycle timestamps
    accepted_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    # Passive start reading and verified end reading
    gps_start_lat: Optional[float] = None
    gps_start_lng: Optional[float] = None
    gps_end_lat: Optional[float] = None
    gps_end_lng: Optional[float] = None

    access_denied: bool = False
    gps_conflict_resolved: bool = False
    photo_conflict_resolved: bool = False

    # Manager override metadata, all set together
    overridden_by: Optional[UUID] = None
    override_reason: Optional[str] = None
    overridden_at: Optional[datetime] = None
    override_status: Optional[JobStatus] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate job invariants."""
        if not isinstance(self.price, Decimal):
            self.price = Decimal(str(self.price))
        if self.price < 0:
            raise ValidationError("Job price cannot be negative")

        if self.status != JobStatus.AVAILABLE and not self.assigned_cleaner_id:
            raise ValidationError(
                f"Job with status '{self.status.value}' must have an assigned cleaner"
            )
        if self.status == JobStatus.AVAILABLE and self.assigned_cleaner_id:
            raise ValidationError("Available job cannot have an assigned cleaner")

        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)
        if not self.updated_at:
            self.updated_at = self.created_at

    def is_assigned_to(self, cleaner_id: UUID) -> bool:
        """Check if the job is held by the given cleaner."""
        return self.assigned_cleaner_id is not None and self.assigned_cleaner_id == cleaner_id

    def can_transition_to(self, target: JobStatus) -> bool:
        """Check if the job may move to target status."""
        return self.status.can_transition_to(target)

    def ensure_transition(self, target: JobStatus, operation: str) -> None:
        if not self.can_transition_to(target):
            raise InvalidTransitionError(self.status.value, operation)

    def has_override(self) -> bool:
        """Check if a manager has overridden or resolved part of this job."""
        return self.overridden_by is not None

    def worked_minutes(self) -> int:
        """Minutes between start and completion, rounded half-up."""
        if not self.started_at or not self.completed_at:
            return 0

        seconds = (self.completed_at - self.started_at).total_seconds()
        if seconds <= 0:
            return 0

        minutes = Decimal(str(seconds)) / Decimal(60)
        return int(minutes.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
