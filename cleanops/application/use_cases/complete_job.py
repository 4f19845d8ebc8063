"""Complete job use case."""

from dataclasses import dataclass, field, replace
from typing import List, Optional
from uuid import UUID

from cleanops.application.interfaces.repositories import (
    InvoiceRepositoryInterface,
    JobRepositoryInterface,
    PropertyRepositoryInterface,
    UserRepositoryInterface,
)
from cleanops.application.interfaces.services import (
    EventPublisherInterface,
    PhotoStoreInterface,
)
from cleanops.application.services.access_policy import (
    load_assigned_job,
    require_cleaner,
)
from cleanops.application.services.conflict_detector import ConflictDetector
from cleanops.application.services.gps_validator import GPSValidator
from cleanops.application.services.invoice_accrual import InvoiceAccrualEngine
from cleanops.config.logging import get_logger
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.invoice import InvoiceLineItem
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.user import Actor
from cleanops.domain.events import JobCompleted, JobNeedsReview
from cleanops.domain.exceptions.domain_error import ConflictError, NotFoundError
from cleanops.domain.exceptions.transition_error import InvalidTransitionError
from cleanops.domain.value_objects.conflict import Conflict
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from cleanops.infrastructure.monitoring.metrics import (
    record_completion_conflict,
    record_job_transition,
    record_transition_conflict,
)

logger = get_logger(__name__)


@dataclass
class CompleteJobResult:
    """Result of a completion attempt."""

    job: Job
    conflicts: List[Conflict] = field(default_factory=list)
    line_item: Optional[InvoiceLineItem] = None
    duplicate: bool = False

    @property
    def needs_review(self) -> bool:
        return self.job.status == JobStatus.NEEDS_REVIEW


class CompleteJobUseCase:
    """
    Use case for the assigned cleaner finishing a job.

    Completion never fails because of photos, GPS or access: those become
    conflicts and the job is routed to manager review. A clean completion is
    accrued to the cleaner's open invoice in the same transaction. Completing
    an already completed job returns it unchanged.
    """

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        property_repo: PropertyRepositoryInterface,
        user_repo: UserRepositoryInterface,
        invoice_repo: InvoiceRepositoryInterface,
        photo_store: PhotoStoreInterface,
        publisher: EventPublisherInterface,
        transaction_service: TransactionService,
        gps_validator: Optional[GPSValidator] = None,
        clock: Optional[Clock] = None,
    ):
        self.job_repo = job_repo
        self.property_repo = property_repo
        self.photo_store = photo_store
        self.publisher = publisher
        self.transaction_service = transaction_service
        self.gps_validator = gps_validator or GPSValidator()
        self.clock = clock or SystemClock()
        self.conflict_detector = ConflictDetector(self.gps_validator)
        self.accrual_engine = InvoiceAccrualEngine(invoice_repo, user_repo, self.clock)

    async def execute(
        self,
        job_id: UUID,
        actor: Actor,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> CompleteJobResult:
        require_cleaner(actor, "complete jobs")

        if latitude is not None and longitude is not None:
            self.gps_validator.ensure_in_range(latitude, longitude)

        result = await self.transaction_service.execute_in_transaction(
            lambda: self._complete(job_id, actor, latitude, longitude),
            name="complete_job",
        )

        if result.duplicate:
            logger.info(
                "Duplicate completion ignored",
                job_id=str(result.job.id),
                status=result.job.status.value,
            )
            return result

        record_job_transition(
            "complete", JobStatus.IN_PROGRESS.value, result.job.status.value
        )
        for conflict in result.conflicts:
            record_completion_conflict(conflict.type.value)

        logger.info(
            "Job completion recorded",
            job_id=str(result.job.id),
            cleaner_id=str(actor.id),
            status=result.job.status.value,
            conflicts=[conflict.type.value for conflict in result.conflicts],
            line_item_id=str(result.line_item.id) if result.line_item else None,
        )
        return result

    async def _complete(
        self,
        job_id: UUID,
        actor: Actor,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> CompleteJobResult:
        job = await load_assigned_job(self.job_repo, job_id, actor)

        if job.status.is_final():
            return CompleteJobResult(job=job, duplicate=True)

        # Either outcome has to be reachable before conflicts are known
        if not (
            job.can_transition_to(JobStatus.COMPLETED)
            and job.can_transition_to(JobStatus.NEEDS_REVIEW)
        ):
            raise InvalidTransitionError(
                job.status.value,
                "complete",
                f"Job cannot be completed from status '{job.status.value}'. "
                "Job must be in progress.",
            )

        property = await self.property_repo.get_by_id(job.property_id)
        if not property:
            raise NotFoundError("Property", job.property_id)

        photo_count = await self.photo_store.photo_count(job.id)
        conflicts = self.conflict_detector.detect(
            job, property, photo_count, latitude, longitude
        )

        now = self.clock.now()
        completed = replace(
            job,
            status=JobStatus.NEEDS_REVIEW if conflicts else JobStatus.COMPLETED,
            completed_at=now,
            gps_end_lat=latitude,
            gps_end_lng=longitude,
            updated_at=now,
        )

        if not await self.job_repo.update_if_status(completed, JobStatus.IN_PROGRESS):
            record_transition_conflict("complete")
            current = await self.job_repo.get_by_id(job.id)
            if current and current.status.is_finished():
                return CompleteJobResult(job=current, duplicate=True)
            raise ConflictError("Job status changed, please try again", entity_id=job.id)

        if conflicts:
            await self.publisher.publish(
                JobNeedsReview(
                    job_id=job.id,
                    business_id=job.business_id,
                    cleaner_id=actor.id,
                    conflicts=tuple(conflict.type.value for conflict in conflicts),
                    occurred_at=now,
                )
            )
            return CompleteJobResult(job=completed, conflicts=conflicts)

        accrual = await self.accrual_engine.accrue(completed)
        await self.publisher.publish(
            JobCompleted(
                job_id=job.id,
                business_id=job.business_id,
                cleaner_id=actor.id,
                occurred_at=now,
                invoice_id=accrual.invoice.id,
                amount=accrual.line_item.amount,
            )
        )
        return CompleteJobResult(job=completed, line_item=accrual.line_item)
