"""Job photo record endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, status

from cleanops.api.dependencies import (
    ActorDep,
    ClockDep,
    JobRepositoryDep,
    MediaRepositoryDep,
    TransactionServiceDep,
)
from cleanops.api.schemas.common import BaseResponse
from cleanops.api.schemas.photo import PhotoCreateRequest, PhotoResponse
from cleanops.application.use_cases.photos import (
    DeletePhotoUseCase,
    ListJobPhotosUseCase,
    RecordPhotoUseCase,
)

router = APIRouter(prefix="/jobs/{job_id}/photos", tags=["photos"])


@router.post("", response_model=PhotoResponse, status_code=status.HTTP_201_CREATED)
async def record_photo(
    job_id: UUID,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    media_repository: MediaRepositoryDep,
    transaction_service: TransactionServiceDep,
    clock: ClockDep,
    body: Optional[PhotoCreateRequest] = None,
):
    """Record a photo for a job the caller is working on."""
    body = body or PhotoCreateRequest()
    use_case = RecordPhotoUseCase(
        job_repo=job_repository,
        photo_repo=media_repository,
        transaction_service=transaction_service,
        clock=clock,
    )
    photo = await use_case.execute(job_id, actor, uri=body.uri, room=body.room)
    return PhotoResponse.model_validate(photo)


@router.get("", response_model=List[PhotoResponse])
async def list_job_photos(
    job_id: UUID,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    media_repository: MediaRepositoryDep,
):
    photos = await ListJobPhotosUseCase(job_repository, media_repository).execute(
        job_id, actor
    )
    return [PhotoResponse.model_validate(photo) for photo in photos]


@router.delete("/{photo_id}", response_model=BaseResponse)
async def delete_photo(
    job_id: UUID,
    photo_id: UUID,
    actor: ActorDep,
    job_repository: JobRepositoryDep,
    media_repository: MediaRepositoryDep,
    transaction_service: TransactionServiceDep,
):
    """Remove a photo. Refused once the job is completed."""
    use_case = DeletePhotoUseCase(
        job_repo=job_repository,
        photo_repo=media_repository,
        transaction_service=transaction_service,
    )
    await use_case.execute(job_id, photo_id, actor)
    return BaseResponse(message="Photo deleted")
