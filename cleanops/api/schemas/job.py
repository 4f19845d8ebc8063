"""
Job-related API schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from cleanops.config.settings import settings
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.domain.value_objects.pay_type import PayType

from .common import GPSReading, TimestampMixin
from .invoice import LineItemResponse


class JobCreateRequest(BaseModel):
    """Job creation request schema."""

    property_id: UUID
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    cleaning_date: Optional[date] = None
    instructions: Optional[str] = Field(None, max_length=2000)
    pay_type_override: Optional[PayType] = Field(
        None, description="Pay this job hourly or per job regardless of the cleaner default"
    )


class JobResponse(TimestampMixin):
    """Job response schema."""

    id: UUID
    business_id: UUID
    property_id: UUID
    status: JobStatus
    price: Decimal
    assigned_cleaner_id: Optional[UUID] = None
    cleaning_date: Optional[date] = None
    instructions: Optional[str] = None
    pay_type_override: Optional[PayType] = None
    accepted_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    gps_start_lat: Optional[float] = None
    gps_start_lng: Optional[float] = None
    gps_end_lat: Optional[float] = None
    gps_end_lng: Optional[float] = None
    access_denied: bool = False
    gps_conflict_resolved: bool = False
    photo_conflict_resolved: bool = False
    overridden_by: Optional[UUID] = None
    override_reason: Optional[str] = None
    overridden_at: Optional[datetime] = None
    override_status: Optional[JobStatus] = None

    model_config = {"from_attributes": True}


class ConflictSchema(BaseModel):
    """A reason a completion was sent to review."""

    type: str
    message: str
    distance: Optional[float] = None
    photo_count: Optional[int] = None

    model_config = {"from_attributes": True}

    @field_validator("type", mode="before")
    @classmethod
    def enum_value(cls, v):
        return getattr(v, "value", v)


class StartJobRequest(GPSReading):
    """Start request; the location is stored but not verified."""


class CompleteJobRequest(GPSReading):
    """Completion request; the location is verified against the property."""


class AccessDeniedRequest(GPSReading):
    """Access denied report."""


class CompleteJobResponse(BaseModel):
    """Outcome of a completion."""

    job: JobResponse
    needs_review: bool
    conflicts: List[ConflictSchema] = []
    line_item: Optional[LineItemResponse] = None


class ReassignJobRequest(BaseModel):
    """Reassignment request; no cleaner puts the job back on the board."""

    cleaner_id: Optional[UUID] = None


class ConflictCheckRequest(GPSReading):
    """Dry-run conflict check."""


class ConflictReportResponse(BaseModel):
    job_id: UUID
    has_conflicts: bool
    conflicts: List[ConflictSchema] = []


class OverrideReasonRequest(GPSReading):
    """Manager decision with a mandatory explanation."""

    reason: str = Field(..., min_length=settings.OVERRIDE_REASON_MIN_LENGTH, max_length=2000)

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, v):
        if len(v.strip()) < settings.OVERRIDE_REASON_MIN_LENGTH:
            raise ValueError(
                f"Reason must be at least {settings.OVERRIDE_REASON_MIN_LENGTH} characters"
            )
        return v.strip()


class OverrideDetails(BaseModel):
    manager_id: UUID
    reason: str
    previous_status: JobStatus
    new_status: JobStatus
    conflicts_resolved: List[str]
    overridden_at: datetime

    model_config = {"from_attributes": True}


class OverrideResponse(BaseModel):
    """Outcome of a forced completion."""

    job: JobResponse
    override: OverrideDetails
    line_item: Optional[LineItemResponse] = None


class ResolveConflictResponse(BaseModel):
    """Outcome of resolving one kind of conflict."""

    job: JobResponse
    resolved: str
    completed: bool
    remaining_conflicts: List[ConflictSchema] = []
    line_item: Optional[LineItemResponse] = None
