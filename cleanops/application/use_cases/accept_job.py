"""Accept job use case."""

from dataclasses import replace
from typing import Optional
from uuid import UUID

from cleanops.application.interfaces.repositories import JobRepositoryInterface
from cleanops.application.interfaces.services import EventPublisherInterface
from cleanops.application.services.access_policy import load_job, require_cleaner
from cleanops.config.logging import get_logger
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.user import Actor
from cleanops.domain.events import JobAccepted
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


class AcceptJobUseCase:
    """
    Use case for a cleaner claiming an available job.

    Exactly one of any number of concurrent callers wins: the write only
    applies while the stored status is still available.
    """

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        publisher: EventPublisherInterface,
        transaction_service: TransactionService,
        clock: Optional[Clock] = None,
    ):
        self.job_repo = job_repo
        self.publisher = publisher
        self.transaction_service = transaction_service
        self.clock = clock or SystemClock()

    async def execute(self, job_id: UUID, actor: Actor) -> Job:
        require_cleaner(actor, "accept jobs")

        async def operation() -> Job:
            job = await load_job(self.job_repo, job_id, actor)

            if job.assigned_cleaner_id and not job.is_assigned_to(actor.id):
                raise ConflictError(
                    "Another cleaner has already accepted this job", entity_id=job.id
                )
            if not job.can_transition_to(JobStatus.ACCEPTED):
                raise InvalidTransitionError(
                    job.status.value,
                    "accept",
                    f"Job cannot be accepted from status '{job.status.value}'. "
                    "Job must be available.",
                )

            now = self.clock.now()
            accepted = replace(
                job,
                status=JobStatus.ACCEPTED,
                assigned_cleaner_id=actor.id,
                accepted_at=now,
                updated_at=now,
            )

            if not await self.job_repo.update_if_status(accepted, JobStatus.AVAILABLE):
                record_transition_conflict("accept")
                raise ConflictError(
                    "Job was already accepted by another cleaner", entity_id=job.id
                )

            await self.publisher.publish(
                JobAccepted(
                    job_id=job.id,
                    business_id=job.business_id,
                    cleaner_id=actor.id,
                    occurred_at=now,
                )
            )
            return accepted

        job = await self.transaction_service.execute_in_transaction(
            operation, name="accept_job"
        )

        record_job_transition("accept", JobStatus.AVAILABLE.value, JobStatus.ACCEPTED.value)
        logger.info("Job accepted", job_id=str(job.id), cleaner_id=str(actor.id))
        return job
