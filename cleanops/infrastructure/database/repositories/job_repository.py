"""
Cleaning job repository implementation.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cleanops.application.interfaces.repositories import JobRepositoryInterface
from cleanops.config.logging import get_logger
from cleanops.domain.clock import ensure_utc
from cleanops.domain.entities.job import Job
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.infrastructure.database.models.job import CleaningJobModel

logger = get_logger(__name__)


class JobRepository(JobRepositoryInterface):
    """Cleaning job repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, job: Job) -> Job:
        """Create a new job."""
        model = CleaningJobModel(
            id=job.id,
            business_id=job.business_id,
            property_id=job.property_id,
            created_at=job.created_at,
            updated_at=job.updated_at,
            **self._mutable_values(job),
        )

        self.db.add(model)
        await self.db.flush()
        await self.db.refresh(model)

        logger.info("Job created", job_id=str(model.id), business_id=str(job.business_id))
        return self._model_to_entity(model)

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID."""
        stmt = (
            select(CleaningJobModel)
            .where(CleaningJobModel.id == job_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def list_for_business(
        self,
        business_id: UUID,
        status: Optional[JobStatus] = None,
        visible_to_cleaner_id: Optional[UUID] = None,
        limit: int = 100,
    ) -> List[Job]:
        """List jobs of a business, newest first."""
        stmt = select(CleaningJobModel).where(
            CleaningJobModel.business_id == business_id
        )

        if status:
            stmt = stmt.where(CleaningJobModel.status == status.value)

        if visible_to_cleaner_id:
            stmt = stmt.where(
                or_(
                    CleaningJobModel.assigned_cleaner_id.is_(None),
                    CleaningJobModel.assigned_cleaner_id == visible_to_cleaner_id,
                )
            )

        stmt = (
            stmt.order_by(CleaningJobModel.created_at.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)

        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def update_if_status(self, job: Job, expected_status: JobStatus) -> bool:
        """Write the job only if nobody changed its status since it was read."""
        stmt = (
            update(CleaningJobModel)
            .where(
                CleaningJobModel.id == job.id,
                CleaningJobModel.status == expected_status.value,
            )
            .values(**self._mutable_values(job))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)

        if result.rowcount != 1:
            logger.warning(
                "Conditional job update matched no rows",
                job_id=str(job.id),
                expected_status=expected_status.value,
                target_status=job.status.value,
            )
            return False

        return True

    def _mutable_values(self, job: Job) -> Dict[str, Any]:
        return {
            "status": job.status.value,
            "assigned_cleaner_id": job.assigned_cleaner_id,
            "cleaning_date": job.cleaning_date,
            "instructions": job.instructions,
            "price": job.price,
            "pay_type_override": job.pay_type_override.value
            if job.pay_type_override
            else None,
            "accepted_at": job.accepted_at,
            "started_at": job.started_at,
            "completed_at": job.completed_at,
            "gps_start_lat": job.gps_start_lat,
            "gps_start_lng": job.gps_start_lng,
            "gps_end_lat": job.gps_end_lat,
            "gps_end_lng": job.gps_end_lng,
            "access_denied": job.access_denied,
            "gps_conflict_resolved": job.gps_conflict_resolved,
            "photo_conflict_resolved": job.photo_conflict_resolved,
            "overridden_by": job.overridden_by,
            "override_reason": job.override_reason,
            "overridden_at": job.overridden_at,
            "override_status": job.override_status.value
            if job.override_status
            else None,
        }

    def _model_to_entity(self, model: CleaningJobModel) -> Job:
        """Convert model to entity."""
        return Job(
            id=model.id,
            business_id=model.business_id,
            property_id=model.property_id,
            status=JobStatus(model.status),
            assigned_cleaner_id=model.assigned_cleaner_id,
            cleaning_date=model.cleaning_date,
            instructions=model.instructions,
            price=model.price,
            pay_type_override=PayType(model.pay_type_override)
            if model.pay_type_override
            else None,
            accepted_at=ensure_utc(model.accepted_at),
            started_at=ensure_utc(model.started_at),
            completed_at=ensure_utc(model.completed_at),
            gps_start_lat=model.gps_start_lat,
            gps_start_lng=model.gps_start_lng,
            gps_end_lat=model.gps_end_lat,
            gps_end_lng=model.gps_end_lng,
            access_denied=bool(model.access_denied),
            gps_conflict_resolved=bool(model.gps_conflict_resolved),
            photo_conflict_resolved=bool(model.photo_conflict_resolved),
            overridden_by=model.overridden_by,
            override_reason=model.override_reason,
            overridden_at=ensure_utc(model.overridden_at),
            override_status=JobStatus(model.override_status)
            if model.override_status
            else None,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )
