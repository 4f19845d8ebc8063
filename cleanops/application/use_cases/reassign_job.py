"""Reassign and reset job use cases (manager)."""

from dataclasses import replace
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from cleanops.application.interfaces.repositories import (
    JobRepositoryInterface,
    UserRepositoryInterface,
)
from cleanops.application.interfaces.services import EventPublisherInterface
from cleanops.application.services.access_policy import load_job, require_manager
from cleanops.config.logging import get_logger
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.user import Actor
from cleanops.domain.events import JobReassigned, JobReset
from cleanops.domain.exceptions.domain_error import ConflictError, NotFoundError
from cleanops.domain.exceptions.transition_error import InvalidTransitionError
from cleanops.domain.exceptions.validation_error import ValidationError
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from cleanops.infrastructure.monitoring.metrics import (
    record_job_transition,
    record_manager_override,
    record_transition_conflict,
)

logger = get_logger(__name__)


class ReassignJobUseCase:
    """
    Use case for a manager changing who holds a job.

    Giving an available job to a cleaner accepts it on their behalf. Passing
    no cleaner puts an accepted job back on the board.
    """

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        user_repo: UserRepositoryInterface,
        publisher: EventPublisherInterface,
        transaction_service: TransactionService,
        clock: Optional[Clock] = None,
    ):
        self.job_repo = job_repo
        self.user_repo = user_repo
        self.publisher = publisher
        self.transaction_service = transaction_service
        self.clock = clock or SystemClock()

    async def execute(
        self, job_id: UUID, new_cleaner_id: Optional[UUID], actor: Actor
    ) -> Job:
        require_manager(actor, "reassign jobs")

        async def operation() -> Tuple[Job, Job]:
            job = await load_job(self.job_repo, job_id, actor)
            if not job.status.allows_reassignment():
                raise InvalidTransitionError(
                    job.status.value,
                    "reassign",
                    f"Cannot reassign job with status: {job.status.value}",
                )

            now = self.clock.now()
            if new_cleaner_id is None:
                reassigned = self._unassign(job, now)
            else:
                await self._ensure_cleaner(new_cleaner_id, actor)
                if job.status == JobStatus.AVAILABLE:
                    job.ensure_transition(JobStatus.ACCEPTED, "assign")
                    reassigned = replace(
                        job,
                        status=JobStatus.ACCEPTED,
                        assigned_cleaner_id=new_cleaner_id,
                        accepted_at=now,
                        updated_at=now,
                    )
                else:
                    reassigned = replace(
                        job, assigned_cleaner_id=new_cleaner_id, updated_at=now
                    )

            if not await self.job_repo.update_if_status(reassigned, job.status):
                record_transition_conflict("reassign")
                raise ConflictError("Job status changed, please try again", entity_id=job.id)

            await self.publisher.publish(
                JobReassigned(
                    job_id=job.id,
                    business_id=job.business_id,
                    manager_id=actor.id,
                    previous_cleaner_id=job.assigned_cleaner_id,
                    new_cleaner_id=new_cleaner_id,
                    occurred_at=now,
                )
            )
            return job, reassigned

        previous, job = await self.transaction_service.execute_in_transaction(
            operation, name="reassign_job"
        )

        if previous.status != job.status:
            record_job_transition("reassign", previous.status.value, job.status.value)
        record_manager_override("reassign")
        logger.info(
            "Job reassigned",
            job_id=str(job.id),
            manager_id=str(actor.id),
            previous_cleaner_id=str(previous.assigned_cleaner_id)
            if previous.assigned_cleaner_id
            else None,
            new_cleaner_id=str(new_cleaner_id) if new_cleaner_id else None,
            status=job.status.value,
        )
        return job

    def _unassign(self, job: Job, now: datetime) -> Job:
        if job.status != JobStatus.ACCEPTED:
            raise InvalidTransitionError(
                job.status.value,
                "unassign",
                f"Only accepted jobs can be unassigned, job is '{job.status.value}'",
            )
        job.ensure_transition(JobStatus.AVAILABLE, "unassign")
        return replace(
            job,
            status=JobStatus.AVAILABLE,
            assigned_cleaner_id=None,
            accepted_at=None,
            updated_at=now,
        )

    async def _ensure_cleaner(self, cleaner_id: UUID, actor: Actor) -> None:
        cleaner = await self.user_repo.get_by_id(cleaner_id)
        if not cleaner or cleaner.business_id != actor.business_id:
            raise NotFoundError("Cleaner", cleaner_id)
        if not cleaner.is_cleaner():
            raise ValidationError("User is not a cleaner")
        if not cleaner.is_active:
            raise ValidationError("Cleaner account is not active")


class ResetJobUseCase:
    """Use case for a manager putting a job under review back on the board."""

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
        require_manager(actor, "reset jobs")

        async def operation() -> Job:
            job = await load_job(self.job_repo, job_id, actor)
            if job.status != JobStatus.NEEDS_REVIEW:
                raise InvalidTransitionError(
                    job.status.value,
                    "reset",
                    f"Only jobs needing review can be reset, job is '{job.status.value}'",
                )
            job.ensure_transition(JobStatus.AVAILABLE, "reset")

            now = self.clock.now()
            reset = replace(
                job,
                status=JobStatus.AVAILABLE,
                assigned_cleaner_id=None,
                accepted_at=None,
                started_at=None,
                completed_at=None,
                gps_start_lat=None,
                gps_start_lng=None,
                gps_end_lat=None,
                gps_end_lng=None,
                access_denied=False,
                gps_conflict_resolved=False,
                photo_conflict_resolved=False,
                overridden_by=None,
                override_reason=None,
                overridden_at=None,
                override_status=None,
                updated_at=now,
            )

            if not await self.job_repo.update_if_status(reset, JobStatus.NEEDS_REVIEW):
                record_transition_conflict("reset")
                raise ConflictError("Job status changed, please try again", entity_id=job.id)

            await self.publisher.publish(
                JobReset(
                    job_id=job.id,
                    business_id=job.business_id,
                    manager_id=actor.id,
                    previous_cleaner_id=job.assigned_cleaner_id,
                    occurred_at=now,
                )
            )
            return reset

        job = await self.transaction_service.execute_in_transaction(
            operation, name="reset_job"
        )

        record_job_transition("reset", JobStatus.NEEDS_REVIEW.value, JobStatus.AVAILABLE.value)
        record_manager_override("reset")
        logger.info("Job reset to available", job_id=str(job.id), manager_id=str(actor.id))
        return job
