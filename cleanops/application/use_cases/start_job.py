"""Start job use case."""

from dataclasses import replace
from typing import Optional
from uuid import UUID

from cleanops.application.interfaces.repositories import JobRepositoryInterface
from cleanops.application.interfaces.services import EventPublisherInterface
from cleanops.application.services.access_policy import (
    load_assigned_job,
    require_cleaner,
)
from cleanops.application.services.gps_validator import GPSValidator
from cleanops.config.logging import get_logger
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.user import Actor
from cleanops.domain.events import JobStarted
from cleanops.domain.exceptions.domain_error import ConflictError
from cleanops.domain.exceptions.transition_error import InvalidTransitionError
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from cleanops.infrastructure.monitoring.metrics import (
    record_job_transition,
    record_transition_conflict,
)

logger = get_logger(__name__)


class StartJobUseCase:
    """Use case for the assigned cleaner starting work."""

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        publisher: EventPublisherInterface,
        transaction_service: TransactionService,
        gps_validator: Optional[GPSValidator] = None,
        clock: Optional[Clock] = None,
    ):
        self.job_repo = job_repo
        self.publisher = publisher
        self.transaction_service = transaction_service
        self.gps_validator = gps_validator or GPSValidator()
        self.clock = clock or SystemClock()

    async def execute(
        self,
        job_id: UUID,
        actor: Actor,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Job:
        require_cleaner(actor, "start jobs")

        # Start location is stored as-is; only completion is verified
        if latitude is not None and longitude is not None:
            self.gps_validator.ensure_in_range(latitude, longitude)

        async def operation() -> Job:
            job = await load_assigned_job(self.job_repo, job_id, actor)
            if not job.can_transition_to(JobStatus.IN_PROGRESS):
                raise InvalidTransitionError(
                    job.status.value,
                    "start",
                    f"Job cannot be started from status '{job.status.value}'. "
                    "Job must be accepted first.",
                )

            now = self.clock.now()
            started = replace(
                job,
                status=JobStatus.IN_PROGRESS,
                started_at=now,
                gps_start_lat=latitude,
                gps_start_lng=longitude,
                updated_at=now,
            )

            if not await self.job_repo.update_if_status(started, JobStatus.ACCEPTED):
                record_transition_conflict("start")
                raise ConflictError("Job status changed, please try again", entity_id=job.id)

            await self.publisher.publish(
                JobStarted(
                    job_id=job.id,
                    business_id=job.business_id,
                    cleaner_id=actor.id,
                    occurred_at=now,
                )
            )
            return started

        job = await self.transaction_service.execute_in_transaction(
            operation, name="start_job"
        )

        record_job_transition("start", JobStatus.ACCEPTED.value, JobStatus.IN_PROGRESS.value)
        logger.info(
            "Job started",
            job_id=str(job.id),
            cleaner_id=str(actor.id),
            has_gps=latitude is not None,
        )
        return job
