"""
Manager override use cases.

A job under review can be force-completed, or one kind of conflict can be
resolved at a time. Every write records who did it, when and why on the job
itself, and a job left without conflicts is completed and invoiced.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
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
from cleanops.application.services.access_policy import load_job, require_manager
from cleanops.application.services.conflict_detector import ConflictDetector
from cleanops.application.services.gps_validator import GPSValidator
from cleanops.application.services.invoice_accrual import InvoiceAccrualEngine
from cleanops.config.logging import get_logger
from cleanops.config.settings import settings
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.invoice import InvoiceLineItem
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.user import Actor
from cleanops.domain.events import ConflictResolved, JobOverrideCompleted
from cleanops.domain.exceptions.domain_error import ConflictError, NotFoundError
from cleanops.domain.exceptions.transition_error import (
    InvalidTransitionError,
    NoConflictToResolveError,
)
from cleanops.domain.exceptions.validation_error import InvalidOverrideReasonError
from cleanops.domain.value_objects.conflict import Conflict, ConflictType
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


@dataclass
class ConflictReport:
    """Dry-run view of what blocks a job from completing."""

    job_id: UUID
    conflicts: List[Conflict]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


@dataclass
class OverrideRecord:
    """Audit details of a manager override."""

    manager_id: UUID
    reason: str
    previous_status: JobStatus
    new_status: JobStatus
    conflicts_resolved: List[str]
    overridden_at: datetime


@dataclass
class OverrideResult:
    """Result of a forced completion."""

    job: Job
    override: OverrideRecord
    line_item: Optional[InvoiceLineItem] = None


@dataclass
class ResolveConflictResult:
    """Result of resolving one kind of conflict."""

    job: Job
    resolved: ConflictType
    remaining_conflicts: List[Conflict] = field(default_factory=list)
    line_item: Optional[InvoiceLineItem] = None

    @property
    def completed(self) -> bool:
        return self.job.status == JobStatus.COMPLETED


def validate_reason(reason: Optional[str]) -> str:
    reason = (reason or "").strip()
    if len(reason) < settings.OVERRIDE_REASON_MIN_LENGTH:
        raise InvalidOverrideReasonError(settings.OVERRIDE_REASON_MIN_LENGTH)
    return reason


class _ManagerJobUseCase:
    """Shared wiring for use cases acting on jobs under review."""

    operation = "review"

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        property_repo: PropertyRepositoryInterface,
        photo_store: PhotoStoreInterface,
        gps_validator: Optional[GPSValidator] = None,
        clock: Optional[Clock] = None,
    ):
        self.job_repo = job_repo
        self.property_repo = property_repo
        self.photo_store = photo_store
        self.gps_validator = gps_validator or GPSValidator()
        self.clock = clock or SystemClock()
        self.conflict_detector = ConflictDetector(self.gps_validator)

    async def _load_job_under_review(self, job_id: UUID, actor: Actor) -> Job:
        job = await load_job(self.job_repo, job_id, actor)
        if job.status != JobStatus.NEEDS_REVIEW:
            raise InvalidTransitionError(
                job.status.value,
                self.operation,
                f"Job must be in needs_review status to {self.operation}, "
                f"job is '{job.status.value}'",
            )
        return job

    async def _detect(
        self, job: Job, latitude: Optional[float], longitude: Optional[float]
    ) -> List[Conflict]:
        property = await self.property_repo.get_by_id(job.property_id)
        if not property:
            raise NotFoundError("Property", job.property_id)

        photo_count = await self.photo_store.photo_count(job.id)
        return self.conflict_detector.detect(
            job, property, photo_count, latitude, longitude
        )

    def _reading(
        self, job: Job, latitude: Optional[float], longitude: Optional[float]
    ):
        """Use a fresh reading when given, otherwise the one stored at completion."""
        if latitude is not None and longitude is not None:
            self.gps_validator.ensure_in_range(latitude, longitude)
            return latitude, longitude
        return job.gps_end_lat, job.gps_end_lng

    async def _write(self, job: Job, action: str) -> None:
        if not await self.job_repo.update_if_status(job, JobStatus.NEEDS_REVIEW):
            record_transition_conflict(action)
            raise ConflictError("Job status changed, please try again", entity_id=job.id)


class DetectConflictsUseCase(_ManagerJobUseCase):
    """Read-only check of the conflicts a job would have right now."""

    async def execute(
        self,
        job_id: UUID,
        actor: Actor,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> ConflictReport:
        require_manager(actor, "inspect job conflicts")

        job = await load_job(self.job_repo, job_id, actor)
        latitude, longitude = self._reading(job, latitude, longitude)
        conflicts = await self._detect(job, latitude, longitude)

        return ConflictReport(job_id=job.id, conflicts=conflicts)


class OverrideCompletionUseCase(_ManagerJobUseCase):
    """Force-complete a job under review and invoice it."""

    operation = "override completion"

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
        super().__init__(job_repo, property_repo, photo_store, gps_validator, clock)
        self.publisher = publisher
        self.transaction_service = transaction_service
        self.accrual_engine = InvoiceAccrualEngine(invoice_repo, user_repo, self.clock)

    async def execute(
        self,
        job_id: UUID,
        reason: str,
        actor: Actor,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> OverrideResult:
        require_manager(actor, "override job completion")
        reason = validate_reason(reason)

        async def operation() -> OverrideResult:
            job = await self._load_job_under_review(job_id, actor)
            gps_lat, gps_lng = self._reading(job, latitude, longitude)
            conflicts = await self._detect(job, gps_lat, gps_lng)
            job.ensure_transition(JobStatus.COMPLETED, self.operation)

            now = self.clock.now()
            completed = replace(
                job,
                status=JobStatus.COMPLETED,
                gps_end_lat=gps_lat,
                gps_end_lng=gps_lng,
                overridden_by=actor.id,
                override_reason=reason,
                overridden_at=now,
                override_status=JobStatus.COMPLETED,
                updated_at=now,
            )
            await self._write(completed, "override")

            accrual = await self.accrual_engine.accrue(completed)
            resolved = [conflict.type.value for conflict in conflicts]

            await self.publisher.publish(
                JobOverrideCompleted(
                    job_id=job.id,
                    business_id=job.business_id,
                    manager_id=actor.id,
                    cleaner_id=job.assigned_cleaner_id,
                    reason=reason,
                    conflicts_resolved=tuple(resolved),
                    occurred_at=now,
                )
            )

            return OverrideResult(
                job=completed,
                override=OverrideRecord(
                    manager_id=actor.id,
                    reason=reason,
                    previous_status=job.status,
                    new_status=completed.status,
                    conflicts_resolved=resolved,
                    overridden_at=now,
                ),
                line_item=accrual.line_item,
            )

        result = await self.transaction_service.execute_in_transaction(
            operation, name="override_completion"
        )

        record_job_transition(
            "override", JobStatus.NEEDS_REVIEW.value, JobStatus.COMPLETED.value
        )
        record_manager_override("override_completion")
        logger.info(
            "Job completion overridden",
            job_id=str(result.job.id),
            manager_id=str(actor.id),
            reason=reason,
            conflicts_resolved=result.override.conflicts_resolved,
            line_item_id=str(result.line_item.id) if result.line_item else None,
        )
        return result


class _ResolveConflictUseCase(_ManagerJobUseCase):
    """Resolve one kind of conflict, completing the job if nothing else blocks it."""

    conflict_label = ""
    reason_prefix = ""

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
        super().__init__(job_repo, property_repo, photo_store, gps_validator, clock)
        self.publisher = publisher
        self.transaction_service = transaction_service
        self.accrual_engine = InvoiceAccrualEngine(invoice_repo, user_repo, self.clock)

    def _targets(self, conflict: Conflict) -> bool:
        raise NotImplementedError

    def _mark_resolved(self, job: Job) -> Job:
        raise NotImplementedError

    async def _resolve(
        self,
        job_id: UUID,
        reason: str,
        actor: Actor,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> ResolveConflictResult:
        require_manager(actor, f"resolve {self.conflict_label} conflicts")
        reason = validate_reason(reason)

        async def operation() -> ResolveConflictResult:
            job = await self._load_job_under_review(job_id, actor)
            gps_lat, gps_lng = self._reading(job, latitude, longitude)
            conflicts = await self._detect(job, gps_lat, gps_lng)

            targeted = [conflict for conflict in conflicts if self._targets(conflict)]
            if not targeted:
                raise NoConflictToResolveError(job.id, self.conflict_label)
            remaining = [conflict for conflict in conflicts if not self._targets(conflict)]

            now = self.clock.now()
            final_status = JobStatus.NEEDS_REVIEW if remaining else JobStatus.COMPLETED
            if final_status != job.status:
                job.ensure_transition(final_status, self.operation)
            resolved = replace(
                self._mark_resolved(job),
                status=final_status,
                gps_end_lat=gps_lat,
                gps_end_lng=gps_lng,
                overridden_by=actor.id,
                override_reason=f"{self.reason_prefix}{reason}",
                overridden_at=now,
                override_status=final_status,
                updated_at=now,
            )
            await self._write(resolved, f"resolve_{self.conflict_label.lower()}")

            line_item = None
            if final_status == JobStatus.COMPLETED:
                line_item = (await self.accrual_engine.accrue(resolved)).line_item

            await self.publisher.publish(
                ConflictResolved(
                    job_id=job.id,
                    business_id=job.business_id,
                    manager_id=actor.id,
                    cleaner_id=job.assigned_cleaner_id,
                    conflict_type=targeted[0].type.value,
                    remaining_conflicts=tuple(c.type.value for c in remaining),
                    occurred_at=now,
                )
            )

            return ResolveConflictResult(
                job=resolved,
                resolved=targeted[0].type,
                remaining_conflicts=remaining,
                line_item=line_item,
            )

        result = await self.transaction_service.execute_in_transaction(
            operation, name=f"resolve_{self.conflict_label.lower()}_conflict"
        )

        if result.completed:
            record_job_transition(
                "resolve", JobStatus.NEEDS_REVIEW.value, JobStatus.COMPLETED.value
            )
        record_manager_override(f"resolve_{self.conflict_label.lower()}")
        logger.info(
            "Conflict resolved",
            job_id=str(result.job.id),
            manager_id=str(actor.id),
            conflict_type=result.resolved.value,
            remaining=[conflict.type.value for conflict in result.remaining_conflicts],
            status=result.job.status.value,
        )
        return result


class ResolveGPSConflictUseCase(_ResolveConflictUseCase):
    operation = "resolve GPS conflict"
    conflict_label = "GPS"
    reason_prefix = "GPS conflict resolved: "

    def _targets(self, conflict: Conflict) -> bool:
        return conflict.type.is_gps()

    def _mark_resolved(self, job: Job) -> Job:
        return replace(job, gps_conflict_resolved=True)

    async def execute(
        self,
        job_id: UUID,
        reason: str,
        actor: Actor,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> ResolveConflictResult:
        return await self._resolve(job_id, reason, actor, latitude, longitude)


class ResolvePhotoConflictUseCase(_ResolveConflictUseCase):
    operation = "resolve photo conflict"
    conflict_label = "photo"
    reason_prefix = "Photo conflict resolved: "

    def _targets(self, conflict: Conflict) -> bool:
        return conflict.type == ConflictType.MISSING_PHOTOS

    def _mark_resolved(self, job: Job) -> Job:
        return replace(job, photo_conflict_resolved=True)

    async def execute(
        self, job_id: UUID, reason: str, actor: Actor
    ) -> ResolveConflictResult:
        return await self._resolve(job_id, reason, actor, None, None)
