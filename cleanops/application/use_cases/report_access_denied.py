"""Report access denied use case."""

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
from cleanops.domain.events import AccessDenied
from cleanops.domain.exceptions.domain_error import ConflictError
from cleanops.domain.exceptions.transition_error import InvalidTransitionError
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from cleanops.infrastructure.monitoring.metrics import record_transition_conflict

logger = get_logger(__name__)


class ReportAccessDeniedUseCase:
    """
    Use case for a cleaner flagging that the property could not be entered.

    The job keeps its status; the flag becomes an access_denied conflict when
    the job is completed.
    """

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
        require_cleaner(actor, "report access problems")

        if latitude is not None and longitude is not None:
            self.gps_validator.ensure_in_range(latitude, longitude)

        async def operation() -> Job:
            job = await load_assigned_job(self.job_repo, job_id, actor)
            if job.status not in [JobStatus.ACCEPTED, JobStatus.IN_PROGRESS]:
                raise InvalidTransitionError(job.status.value, "report access denied for")

            now = self.clock.now()
            flagged = replace(job, access_denied=True, updated_at=now)

            if not await self.job_repo.update_if_status(flagged, job.status):
                record_transition_conflict("access_denied")
                raise ConflictError("Job status changed, please try again", entity_id=job.id)

            await self.publisher.publish(
                AccessDenied(
                    job_id=job.id,
                    business_id=job.business_id,
                    cleaner_id=actor.id,
                    occurred_at=now,
                )
            )
            return flagged

        job = await self.transaction_service.execute_in_transaction(
            operation, name="report_access_denied"
        )

        logger.warning(
            "Access denied reported",
            job_id=str(job.id),
            cleaner_id=str(actor.id),
            status=job.status.value,
        )
        return job
