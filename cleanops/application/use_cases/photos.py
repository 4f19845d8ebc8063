"""
Job photo records.

The images are held by the external photo store; this service only keeps
the records that job completion counts.
"""

from typing import List, Optional
from uuid import UUID, uuid4

from cleanops.application.interfaces.repositories import (
    JobRepositoryInterface,
    PhotoRepositoryInterface,
)
from cleanops.application.services.access_policy import (
    can_view_job,
    load_assigned_job,
    load_job,
)
from cleanops.config.logging import get_logger
from cleanops.config.settings import settings
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.photo import Photo
from cleanops.domain.entities.user import Actor
from cleanops.domain.exceptions.domain_error import NotFoundError
from cleanops.domain.exceptions.transition_error import InvalidTransitionError
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)

logger = get_logger(__name__)


def placeholder_uri(photo_id: UUID) -> str:
    return f"{settings.PHOTO_STORE_BASE_URL.rstrip('/')}/{photo_id}.jpg"


async def _load_photo_job(
    job_repo: JobRepositoryInterface, job_id: UUID, actor: Actor
) -> Job:
    # Cleaners only touch the photos of jobs they hold
    if actor.is_manager():
        return await load_job(job_repo, job_id, actor)
    return await load_assigned_job(job_repo, job_id, actor)


class RecordPhotoUseCase:
    """Record a photo taken for a job that is under way or in review."""

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        photo_repo: PhotoRepositoryInterface,
        transaction_service: TransactionService,
        clock: Optional[Clock] = None,
    ):
        self.job_repo = job_repo
        self.photo_repo = photo_repo
        self.transaction_service = transaction_service
        self.clock = clock or SystemClock()

    async def execute(
        self,
        job_id: UUID,
        actor: Actor,
        uri: Optional[str] = None,
        room: Optional[str] = None,
    ) -> Photo:
        async def operation() -> Photo:
            job = await _load_photo_job(self.job_repo, job_id, actor)
            if job.status in (JobStatus.AVAILABLE, JobStatus.COMPLETED):
                raise InvalidTransitionError(job.status.value, "add photos to")

            photo_id = uuid4()
            return await self.photo_repo.record(
                Photo(
                    id=photo_id,
                    job_id=job.id,
                    uri=uri or placeholder_uri(photo_id),
                    uploaded_by=actor.id,
                    room=room,
                    created_at=self.clock.now(),
                )
            )

        photo = await self.transaction_service.execute_in_transaction(
            operation, name="record_photo"
        )

        logger.info(
            "Photo recorded",
            job_id=str(job_id),
            photo_id=str(photo.id),
            uploaded_by=str(actor.id),
        )
        return photo


class ListJobPhotosUseCase:
    def __init__(
        self, job_repo: JobRepositoryInterface, photo_repo: PhotoRepositoryInterface
    ):
        self.job_repo = job_repo
        self.photo_repo = photo_repo

    async def execute(self, job_id: UUID, actor: Actor) -> List[Photo]:
        job = await self.job_repo.get_by_id(job_id)
        if not job or not can_view_job(job, actor):
            raise NotFoundError("Job", job_id)
        return await self.photo_repo.list_for_job(job.id)


class DeletePhotoUseCase:
    """
    Remove a photo from a job.

    The record is voided rather than deleted so the upload stays traceable.
    Once a job is completed its photos are frozen.
    """

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        photo_repo: PhotoRepositoryInterface,
        transaction_service: TransactionService,
    ):
        self.job_repo = job_repo
        self.photo_repo = photo_repo
        self.transaction_service = transaction_service

    async def execute(self, job_id: UUID, photo_id: UUID, actor: Actor) -> None:
        async def operation() -> None:
            job = await _load_photo_job(self.job_repo, job_id, actor)

            photo = await self.photo_repo.get_by_id(photo_id)
            if not photo or photo.job_id != job.id or photo.is_voided:
                raise NotFoundError("Photo", photo_id)

            if job.status == JobStatus.COMPLETED:
                raise InvalidTransitionError(
                    job.status.value,
                    "delete photos",
                    "Cannot delete photos from a completed job",
                )

            if not await self.photo_repo.void(photo.id):
                raise NotFoundError("Photo", photo_id)

        await self.transaction_service.execute_in_transaction(
            operation, name="delete_photo"
        )

        logger.info(
            "Photo deleted",
            job_id=str(job_id),
            photo_id=str(photo_id),
            deleted_by=str(actor.id),
        )
