"""
Unit tests for manager use cases: overrides, conflict resolution,
reassignment and reset.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from cleanops.application.use_cases.manager_overrides import (
    DetectConflictsUseCase,
    OverrideCompletionUseCase,
    ResolveGPSConflictUseCase,
    ResolvePhotoConflictUseCase,
    validate_reason,
)
from cleanops.application.use_cases.reassign_job import (
    ReassignJobUseCase,
    ResetJobUseCase,
)
from cleanops.domain.clock import FixedClock
from cleanops.domain.entities.invoice import Invoice
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.property import Property
from cleanops.domain.entities.user import User
from cleanops.domain.events import (
    ConflictResolved,
    JobOverrideCompleted,
    JobReassigned,
    JobReset,
)
from cleanops.domain.exceptions import (
    ForbiddenError,
    InvalidOverrideReasonError,
    InvalidTransitionError,
    NoConflictToResolveError,
    NotFoundError,
    ValidationError,
)
from cleanops.domain.value_objects.conflict import ConflictType
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.domain.value_objects.user_role import UserRole

NOW = datetime(2025, 1, 6, 11, 0, tzinfo=timezone.utc)
REASON = "Cleaner was at the back entrance of the building"


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def property(business_id):
    return Property(
        business_id=business_id, name="Loft", latitude=40.7128, longitude=-74.0061
    )


@pytest.fixture
def cleaner_user(cleaner):
    return User(
        id=cleaner.id,
        business_id=cleaner.business_id,
        role=UserRole.CLEANER,
        email="cleaner@example.com",
        pay_type=PayType.PER_JOB,
    )


@pytest.fixture
def review_job(property, cleaner, mock_job_repository):
    """A job completed 200m away from the property."""
    job = Job(
        business_id=property.business_id,
        property_id=property.id,
        price=Decimal("150.00"),
        status=JobStatus.NEEDS_REVIEW,
        assigned_cleaner_id=cleaner.id,
        started_at=NOW - timedelta(hours=2),
        completed_at=NOW - timedelta(minutes=5),
        gps_end_lat=40.7146,
        gps_end_lng=-74.0061,
    )
    mock_job_repository.get_by_id.return_value = job
    return job


@pytest.fixture
def wired(
    property, cleaner_user, mock_property_repository, mock_user_repository,
    mock_invoice_repository,
):
    mock_property_repository.get_by_id.return_value = property
    mock_user_repository.get_by_id.return_value = cleaner_user
    mock_invoice_repository.get_or_create_open = AsyncMock(
        return_value=Invoice(
            business_id=cleaner_user.business_id,
            cleaner_id=cleaner_user.id,
            pay_type=PayType.PER_JOB,
            period_start=NOW,
            period_end=NOW + timedelta(days=14),
        )
    )


def build(use_case_class, repos):
    return use_case_class(
        repos["job_repo"], repos["property_repo"], repos["user_repo"],
        repos["invoice_repo"], repos["photo_store"], repos["publisher"],
        repos["transaction_service"], clock=repos["clock"],
    )


@pytest.fixture
def repos(
    wired, mock_job_repository, mock_property_repository, mock_user_repository,
    mock_invoice_repository, mock_photo_store, mock_publisher,
    mock_transaction_service, clock,
):
    return {
        "job_repo": mock_job_repository,
        "property_repo": mock_property_repository,
        "user_repo": mock_user_repository,
        "invoice_repo": mock_invoice_repository,
        "photo_store": mock_photo_store,
        "publisher": mock_publisher,
        "transaction_service": mock_transaction_service,
        "clock": clock,
    }


class TestValidateReason:
    def test_strips_whitespace(self):
        assert validate_reason(f"  {REASON}  ") == REASON

    @pytest.mark.parametrize("reason", [None, "", "   ", "too short", "  short   "])
    def test_rejects_short_reasons(self, reason):
        with pytest.raises(InvalidOverrideReasonError):
            validate_reason(reason)


class TestDetectConflictsUseCase:
    @pytest.mark.asyncio
    async def test_reports_without_writing(
        self, repos, review_job, manager, mock_job_repository
    ):
        use_case = DetectConflictsUseCase(
            repos["job_repo"], repos["property_repo"], repos["photo_store"]
        )

        report = await use_case.execute(review_job.id, manager)

        assert report.has_conflicts is True
        assert [c.type for c in report.conflicts] == [ConflictType.GPS_MISMATCH]
        mock_job_repository.update_if_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_fresh_reading_replaces_stored_one(self, repos, review_job, manager):
        use_case = DetectConflictsUseCase(
            repos["job_repo"], repos["property_repo"], repos["photo_store"]
        )

        report = await use_case.execute(review_job.id, manager, 40.7129, -74.0061)

        assert report.has_conflicts is False

    @pytest.mark.asyncio
    async def test_cleaners_cannot_inspect(self, repos, cleaner):
        use_case = DetectConflictsUseCase(
            repos["job_repo"], repos["property_repo"], repos["photo_store"]
        )
        with pytest.raises(ForbiddenError):
            await use_case.execute(uuid4(), cleaner)


class TestOverrideCompletionUseCase:
    """Test cases for OverrideCompletionUseCase."""

    @pytest.mark.asyncio
    async def test_completes_and_invoices(
        self, repos, review_job, manager, mock_invoice_repository, mock_publisher
    ):
        result = await build(OverrideCompletionUseCase, repos).execute(
            review_job.id, REASON, manager
        )

        assert result.job.status == JobStatus.COMPLETED
        assert result.job.overridden_by == manager.id
        assert result.job.override_reason == REASON
        assert result.job.overridden_at == NOW
        assert result.job.override_status == JobStatus.COMPLETED
        assert result.override.previous_status == JobStatus.NEEDS_REVIEW
        assert result.override.conflicts_resolved == ["gps_mismatch"]
        assert result.line_item.amount == Decimal("150.00")
        mock_invoice_repository.append_line_item.assert_awaited_once()

        event = mock_publisher.publish.await_args.args[0]
        assert isinstance(event, JobOverrideCompleted)
        assert event.cleaner_id == review_job.assigned_cleaner_id

    @pytest.mark.asyncio
    async def test_cleaner_cannot_override(self, repos, cleaner):
        with pytest.raises(ForbiddenError):
            await build(OverrideCompletionUseCase, repos).execute(uuid4(), REASON, cleaner)

    @pytest.mark.asyncio
    async def test_short_reason(self, repos, review_job, manager, mock_job_repository):
        with pytest.raises(InvalidOverrideReasonError):
            await build(OverrideCompletionUseCase, repos).execute(
                review_job.id, "ok", manager
            )
        mock_job_repository.get_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_only_jobs_under_review(
        self, repos, review_job, manager, mock_job_repository
    ):
        review_job.status = JobStatus.IN_PROGRESS

        with pytest.raises(InvalidTransitionError, match="needs_review"):
            await build(OverrideCompletionUseCase, repos).execute(
                review_job.id, REASON, manager
            )


class TestResolveConflictUseCases:
    """Test cases for narrow GPS and photo resolution."""

    @pytest.mark.asyncio
    async def test_gps_resolution_completes_when_nothing_else_blocks(
        self, repos, review_job, manager, mock_publisher
    ):
        result = await build(ResolveGPSConflictUseCase, repos).execute(
            review_job.id, REASON, manager
        )

        assert result.completed is True
        assert result.resolved == ConflictType.GPS_MISMATCH
        assert result.remaining_conflicts == []
        assert result.job.gps_conflict_resolved is True
        assert result.job.override_reason == f"GPS conflict resolved: {REASON}"
        assert result.line_item is not None

        event = mock_publisher.publish.await_args.args[0]
        assert isinstance(event, ConflictResolved)
        assert event.conflict_type == "gps_mismatch"

    @pytest.mark.asyncio
    async def test_gps_resolution_keeps_review_when_photos_missing(
        self, repos, review_job, manager, mock_photo_store, mock_invoice_repository
    ):
        mock_photo_store.photo_count.return_value = 0

        result = await build(ResolveGPSConflictUseCase, repos).execute(
            review_job.id, REASON, manager
        )

        assert result.completed is False
        assert result.job.status == JobStatus.NEEDS_REVIEW
        assert result.job.override_status == JobStatus.NEEDS_REVIEW
        assert [c.type for c in result.remaining_conflicts] == [ConflictType.MISSING_PHOTOS]
        assert result.line_item is None
        mock_invoice_repository.append_line_item.assert_not_called()

    @pytest.mark.asyncio
    async def test_photo_resolution_without_photo_conflict(
        self, repos, review_job, manager
    ):
        with pytest.raises(NoConflictToResolveError, match="No photo conflict"):
            await build(ResolvePhotoConflictUseCase, repos).execute(
                review_job.id, REASON, manager
            )

    @pytest.mark.asyncio
    async def test_gps_resolution_without_gps_conflict(
        self, repos, review_job, manager, mock_photo_store
    ):
        review_job.gps_end_lat = 40.7129
        mock_photo_store.photo_count.return_value = 0

        with pytest.raises(NoConflictToResolveError, match="No GPS conflict"):
            await build(ResolveGPSConflictUseCase, repos).execute(
                review_job.id, REASON, manager
            )

    @pytest.mark.asyncio
    async def test_access_denied_survives_narrow_resolutions(
        self, repos, review_job, manager
    ):
        review_job.access_denied = True

        result = await build(ResolveGPSConflictUseCase, repos).execute(
            review_job.id, REASON, manager
        )

        assert result.completed is False
        assert [c.type for c in result.remaining_conflicts] == [ConflictType.ACCESS_DENIED]


class TestReassignJobUseCase:
    """Test cases for ReassignJobUseCase."""

    @pytest.fixture
    def use_case(
        self, mock_job_repository, mock_user_repository, mock_publisher,
        mock_transaction_service, clock,
    ):
        return ReassignJobUseCase(
            mock_job_repository, mock_user_repository, mock_publisher,
            mock_transaction_service, clock,
        )

    @pytest.fixture
    def new_cleaner(self, business_id, mock_user_repository):
        user = User(
            business_id=business_id, role=UserRole.CLEANER, email="new@example.com"
        )
        mock_user_repository.get_by_id.return_value = user
        return user

    def _job(self, property, status, cleaner_id=None):
        return Job(
            business_id=property.business_id,
            property_id=property.id,
            price=Decimal("90.00"),
            status=status,
            assigned_cleaner_id=cleaner_id,
        )

    @pytest.mark.asyncio
    async def test_assigning_available_job_accepts_it(
        self, use_case, manager, property, new_cleaner, mock_job_repository, mock_publisher
    ):
        mock_job_repository.get_by_id.return_value = self._job(property, JobStatus.AVAILABLE)

        job = await use_case.execute(uuid4(), new_cleaner.id, manager)

        assert job.status == JobStatus.ACCEPTED
        assert job.assigned_cleaner_id == new_cleaner.id
        assert job.accepted_at == NOW
        assert mock_job_repository.update_if_status.await_args.args[1] == JobStatus.AVAILABLE
        assert isinstance(mock_publisher.publish.await_args.args[0], JobReassigned)

    @pytest.mark.asyncio
    async def test_swapping_cleaner_keeps_status(
        self, use_case, manager, property, cleaner, new_cleaner, mock_job_repository,
        mock_publisher,
    ):
        mock_job_repository.get_by_id.return_value = self._job(
            property, JobStatus.ACCEPTED, cleaner.id
        )

        job = await use_case.execute(uuid4(), new_cleaner.id, manager)

        assert job.status == JobStatus.ACCEPTED
        assert job.assigned_cleaner_id == new_cleaner.id
        event = mock_publisher.publish.await_args.args[0]
        assert event.previous_cleaner_id == cleaner.id

    @pytest.mark.asyncio
    async def test_unassign_puts_job_back_on_board(
        self, use_case, manager, property, cleaner, mock_job_repository
    ):
        mock_job_repository.get_by_id.return_value = self._job(
            property, JobStatus.ACCEPTED, cleaner.id
        )

        job = await use_case.execute(uuid4(), None, manager)

        assert job.status == JobStatus.AVAILABLE
        assert job.assigned_cleaner_id is None
        assert job.accepted_at is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [JobStatus.IN_PROGRESS, JobStatus.COMPLETED])
    async def test_cannot_reassign_working_or_done_jobs(
        self, use_case, manager, property, cleaner, new_cleaner, mock_job_repository, status
    ):
        mock_job_repository.get_by_id.return_value = self._job(property, status, cleaner.id)

        with pytest.raises(InvalidTransitionError, match="Cannot reassign job with status"):
            await use_case.execute(uuid4(), new_cleaner.id, manager)

    @pytest.mark.asyncio
    async def test_target_must_be_an_active_cleaner(
        self, use_case, manager, property, mock_job_repository, mock_user_repository
    ):
        mock_job_repository.get_by_id.return_value = self._job(property, JobStatus.AVAILABLE)
        mock_user_repository.get_by_id.return_value = User(
            business_id=manager.business_id, role=UserRole.MANAGER, email="m@example.com"
        )

        with pytest.raises(ValidationError, match="not a cleaner"):
            await use_case.execute(uuid4(), uuid4(), manager)

        mock_user_repository.get_by_id.return_value = User(
            business_id=manager.business_id,
            role=UserRole.CLEANER,
            email="gone@example.com",
            is_active=False,
        )
        with pytest.raises(ValidationError, match="not active"):
            await use_case.execute(uuid4(), uuid4(), manager)

    @pytest.mark.asyncio
    async def test_cleaner_of_another_business(
        self, use_case, manager, property, mock_job_repository, mock_user_repository
    ):
        mock_job_repository.get_by_id.return_value = self._job(property, JobStatus.AVAILABLE)
        mock_user_repository.get_by_id.return_value = User(
            business_id=uuid4(), role=UserRole.CLEANER, email="x@example.com"
        )

        with pytest.raises(NotFoundError):
            await use_case.execute(uuid4(), uuid4(), manager)


class TestResetJobUseCase:
    @pytest.mark.asyncio
    async def test_clears_everything(
        self, review_job, manager, mock_job_repository, mock_publisher,
        mock_transaction_service, clock,
    ):
        review_job.access_denied = True
        review_job.gps_conflict_resolved = True
        use_case = ResetJobUseCase(
            mock_job_repository, mock_publisher, mock_transaction_service, clock
        )

        job = await use_case.execute(review_job.id, manager)

        assert job.status == JobStatus.AVAILABLE
        assert job.assigned_cleaner_id is None
        assert job.started_at is None
        assert job.completed_at is None
        assert job.gps_end_lat is None
        assert job.access_denied is False
        assert job.gps_conflict_resolved is False

        event = mock_publisher.publish.await_args.args[0]
        assert isinstance(event, JobReset)
        assert event.previous_cleaner_id == review_job.assigned_cleaner_id

    @pytest.mark.asyncio
    async def test_only_jobs_under_review(
        self, review_job, manager, mock_job_repository, mock_publisher,
        mock_transaction_service,
    ):
        review_job.status = JobStatus.COMPLETED
        use_case = ResetJobUseCase(
            mock_job_repository, mock_publisher, mock_transaction_service
        )

        with pytest.raises(InvalidTransitionError):
            await use_case.execute(review_job.id, manager)
