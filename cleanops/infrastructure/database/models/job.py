"""
Cleaning job SQLAlchemy model.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
)

from cleanops.domain.value_objects.job_status import JobStatus

from .base import BaseModel

GPS = Numeric(10, 7, asdecimal=False)


class CleaningJobModel(BaseModel):
    """Cleaning job database model."""

    __tablename__ = "cleaning_jobs"

    business_id = Column(Uuid, nullable=False)
    property_id = Column(Uuid, ForeignKey("properties.id"), nullable=False, index=True)
    status = Column(String(20), default=JobStatus.AVAILABLE.value, nullable=False)
    assigned_cleaner_id = Column(Uuid, ForeignKey("users.id"))
    cleaning_date = Column(Date)
    instructions = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    pay_type_override = Column(String(20))

    accepted_at = Column(DateTime(timezone=True))
    started_at = Column(DateTime(timezone=True))
    completed_at = Column(DateTime(timezone=True))

    gps_start_lat = Column(GPS)
    gps_start_lng = Column(GPS)
    gps_end_lat = Column(GPS)
    gps_end_lng = Column(GPS)

    access_denied = Column(Boolean, default=False, nullable=False)
    gps_conflict_resolved = Column(Boolean, default=False, nullable=False)
    photo_conflict_resolved = Column(Boolean, default=False, nullable=False)

    overridden_by = Column(Uuid, ForeignKey("users.id"))
    override_reason = Column(Text)
    overridden_at = Column(DateTime(timezone=True))
    override_status = Column(String(20))

    __table_args__ = (
        CheckConstraint(
            "status IN ('available', 'accepted', 'in_progress', 'completed', 'needs_review')",
            name="status",
        ),
        CheckConstraint(
            "status = 'available' OR assigned_cleaner_id IS NOT NULL",
            name="assigned_unless_available",
        ),
        CheckConstraint(
            "status <> 'available' OR assigned_cleaner_id IS NULL",
            name="unassigned_when_available",
        ),
        CheckConstraint("price >= 0", name="price_non_negative"),
        CheckConstraint(
            "pay_type_override IS NULL OR pay_type_override IN ('hourly', 'per_job')",
            name="pay_type_override",
        ),
        # Override metadata is all-or-nothing and always carries a reason
        CheckConstraint(
            "(overridden_by IS NULL AND override_reason IS NULL"
            " AND overridden_at IS NULL AND override_status IS NULL)"
            " OR (overridden_by IS NOT NULL AND override_reason IS NOT NULL"
            " AND length(trim(override_reason)) > 0 AND overridden_at IS NOT NULL"
            " AND override_status IN ('completed', 'needs_review'))",
            name="override_complete",
        ),
        Index("idx_cleaning_jobs_business_status", "business_id", "status"),
        Index("idx_cleaning_jobs_cleaner_status", "assigned_cleaner_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<CleaningJob(id={self.id}, status={self.status})>"
