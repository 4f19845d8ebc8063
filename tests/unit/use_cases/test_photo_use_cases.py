"""
Unit tests for job photo records.
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from cleanops.application.use_cases.photos import (
    DeletePhotoUseCase,
    ListJobPhotosUseCase,
    RecordPhotoUseCase,
)
from cleanops.domain.clock import FixedClock
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.photo import Photo
from cleanops.domain.exceptions import InvalidTransitionError, NotFoundError
from cleanops.domain.value_objects.job_status import JobStatus

NOW = datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(NOW)


def held_job(cleaner, status=JobStatus.IN_PROGRESS):
    return Job(
        business_id=cleaner.business_id,
        property_id=uuid4(),
        price=Decimal("120.00"),
        status=status,
        assigned_cleaner_id=cleaner.id,
    )


class TestRecordPhotoUseCase:
    @pytest.fixture
    def use_case(
        self, mock_job_repository, mock_photo_repository, mock_transaction_service, clock
    ):
        return RecordPhotoUseCase(
            mock_job_repository, mock_photo_repository, mock_transaction_service, clock
        )

    @pytest.mark.asyncio
    async def test_assigns_placeholder_uri(
        self, use_case, cleaner, mock_job_repository, mock_photo_repository
    ):
        job = held_job(cleaner)
        mock_job_repository.get_by_id.return_value = job

        photo = await use_case.execute(job.id, cleaner, room="Kitchen")

        assert photo.job_id == job.id
        assert photo.uri == f"https://photos.example.com/{photo.id}.jpg"
        assert photo.room == "Kitchen"
        assert photo.uploaded_by == cleaner.id
        assert photo.created_at == NOW
        mock_photo_repository.record.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_keeps_uploaded_uri(self, use_case, cleaner, mock_job_repository):
        job = held_job(cleaner, JobStatus.ACCEPTED)
        mock_job_repository.get_by_id.return_value = job

        photo = await use_case.execute(job.id, cleaner, uri="s3://photos/kitchen.jpg")

        assert photo.uri == "s3://photos/kitchen.jpg"

    @pytest.mark.asyncio
    async def test_other_cleaners_job_is_not_found(
        self, use_case, cleaner, business_id, mock_job_repository, mock_photo_repository
    ):
        mock_job_repository.get_by_id.return_value = Job(
            business_id=business_id,
            property_id=uuid4(),
            price=Decimal("120.00"),
            status=JobStatus.IN_PROGRESS,
            assigned_cleaner_id=uuid4(),
        )

        with pytest.raises(NotFoundError):
            await use_case.execute(uuid4(), cleaner)
        mock_photo_repository.record.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_manager_may_add_to_review(
        self, use_case, manager, cleaner, mock_job_repository
    ):
        job = held_job(cleaner, JobStatus.NEEDS_REVIEW)
        mock_job_repository.get_by_id.return_value = job

        photo = await use_case.execute(job.id, manager)

        assert photo.uploaded_by == manager.id

    @pytest.mark.asyncio
    async def test_completed_job_rejects_photos(
        self, use_case, cleaner, mock_job_repository, mock_photo_repository
    ):
        job = held_job(cleaner, JobStatus.COMPLETED)
        mock_job_repository.get_by_id.return_value = job

        with pytest.raises(InvalidTransitionError):
            await use_case.execute(job.id, cleaner)
        mock_photo_repository.record.assert_not_awaited()


class TestListJobPhotosUseCase:
    @pytest.mark.asyncio
    async def test_lists_visible_job(
        self, manager, cleaner, mock_job_repository, mock_photo_repository
    ):
        job = held_job(cleaner)
        mock_job_repository.get_by_id.return_value = job
        photos = [Photo(job_id=job.id, uri="s3://photos/1.jpg")]
        mock_photo_repository.list_for_job.return_value = photos

        result = await ListJobPhotosUseCase(
            mock_job_repository, mock_photo_repository
        ).execute(job.id, manager)

        assert result == photos

    @pytest.mark.asyncio
    async def test_other_business_is_not_found(
        self, manager, mock_job_repository, mock_photo_repository
    ):
        mock_job_repository.get_by_id.return_value = Job(
            business_id=uuid4(), property_id=uuid4(), price=Decimal("1")
        )

        with pytest.raises(NotFoundError):
            await ListJobPhotosUseCase(
                mock_job_repository, mock_photo_repository
            ).execute(uuid4(), manager)


class TestDeletePhotoUseCase:
    @pytest.fixture
    def use_case(self, mock_job_repository, mock_photo_repository, mock_transaction_service):
        return DeletePhotoUseCase(
            mock_job_repository, mock_photo_repository, mock_transaction_service
        )

    @pytest.mark.asyncio
    async def test_voids_photo_before_completion(
        self, use_case, cleaner, mock_job_repository, mock_photo_repository
    ):
        job = held_job(cleaner)
        photo = Photo(job_id=job.id, uri="s3://photos/1.jpg")
        mock_job_repository.get_by_id.return_value = job
        mock_photo_repository.get_by_id.return_value = photo

        await use_case.execute(job.id, photo.id, cleaner)

        mock_photo_repository.void.assert_awaited_once_with(photo.id)

    @pytest.mark.asyncio
    async def test_completed_job_keeps_photos(
        self, use_case, cleaner, mock_job_repository, mock_photo_repository
    ):
        job = held_job(cleaner, JobStatus.COMPLETED)
        photo = Photo(job_id=job.id, uri="s3://photos/1.jpg")
        mock_job_repository.get_by_id.return_value = job
        mock_photo_repository.get_by_id.return_value = photo

        with pytest.raises(InvalidTransitionError, match="completed job"):
            await use_case.execute(job.id, photo.id, cleaner)
        mock_photo_repository.void.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_photo_of_another_job_is_not_found(
        self, use_case, cleaner, mock_job_repository, mock_photo_repository
    ):
        job = held_job(cleaner)
        mock_job_repository.get_by_id.return_value = job
        mock_photo_repository.get_by_id.return_value = Photo(
            job_id=uuid4(), uri="s3://photos/1.jpg"
        )

        with pytest.raises(NotFoundError):
            await use_case.execute(job.id, uuid4(), cleaner)
        mock_photo_repository.void.assert_not_awaited()
