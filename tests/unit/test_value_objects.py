"""
Unit tests for value objects and entities.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from cleanops.domain.entities.invoice import Invoice, InvoiceLineItem
from cleanops.domain.entities.job import Job
from cleanops.domain.exceptions.transition_error import InvalidTransitionError
from cleanops.domain.exceptions.validation_error import ValidationError
from cleanops.domain.value_objects.conflict import Conflict, ConflictType
from cleanops.domain.value_objects.invoice_status import InvoiceStatus
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.domain.value_objects.user_role import UserRole


class TestJobStatus:
    """Test JobStatus value object."""

    def test_enum_values(self):
        expected_values = ["available", "accepted", "in_progress", "completed", "needs_review"]
        assert [status.value for status in JobStatus] == expected_values

    def test_allowed_transitions(self):
        assert JobStatus.AVAILABLE.can_transition_to(JobStatus.ACCEPTED) is True
        assert JobStatus.ACCEPTED.can_transition_to(JobStatus.IN_PROGRESS) is True
        assert JobStatus.ACCEPTED.can_transition_to(JobStatus.AVAILABLE) is True
        assert JobStatus.IN_PROGRESS.can_transition_to(JobStatus.COMPLETED) is True
        assert JobStatus.IN_PROGRESS.can_transition_to(JobStatus.NEEDS_REVIEW) is True
        assert JobStatus.NEEDS_REVIEW.can_transition_to(JobStatus.COMPLETED) is True
        assert JobStatus.NEEDS_REVIEW.can_transition_to(JobStatus.AVAILABLE) is True

    def test_forbidden_transitions(self):
        # Steps cannot be skipped
        assert JobStatus.AVAILABLE.can_transition_to(JobStatus.IN_PROGRESS) is False
        assert JobStatus.AVAILABLE.can_transition_to(JobStatus.COMPLETED) is False
        assert JobStatus.ACCEPTED.can_transition_to(JobStatus.COMPLETED) is False

        # Completed is terminal
        for status in JobStatus:
            assert JobStatus.COMPLETED.can_transition_to(status) is False

    def test_is_final(self):
        assert JobStatus.COMPLETED.is_final() is True
        assert JobStatus.NEEDS_REVIEW.is_final() is False
        assert JobStatus.AVAILABLE.is_final() is False

    def test_is_finished(self):
        assert JobStatus.COMPLETED.is_finished() is True
        assert JobStatus.NEEDS_REVIEW.is_finished() is True
        assert JobStatus.IN_PROGRESS.is_finished() is False

    def test_allows_reassignment(self):
        assert JobStatus.AVAILABLE.allows_reassignment() is True
        assert JobStatus.ACCEPTED.allows_reassignment() is True
        assert JobStatus.NEEDS_REVIEW.allows_reassignment() is True
        assert JobStatus.IN_PROGRESS.allows_reassignment() is False
        assert JobStatus.COMPLETED.allows_reassignment() is False


class TestInvoiceStatus:
    """Test InvoiceStatus value object."""

    def test_next_status_is_strictly_forward(self):
        assert InvoiceStatus.OPEN.next_status() == InvoiceStatus.SUBMITTED
        assert InvoiceStatus.SUBMITTED.next_status() == InvoiceStatus.APPROVED
        assert InvoiceStatus.APPROVED.next_status() == InvoiceStatus.PAID
        assert InvoiceStatus.PAID.next_status() is None

    def test_is_locked(self):
        assert InvoiceStatus.OPEN.is_locked() is False
        assert InvoiceStatus.SUBMITTED.is_locked() is True
        assert InvoiceStatus.PAID.is_locked() is True


class TestPayType:
    def test_override_wins(self):
        assert PayType.resolve(PayType.HOURLY, PayType.PER_JOB) == PayType.HOURLY

    def test_cleaner_default_used_without_override(self):
        assert PayType.resolve(None, PayType.HOURLY) == PayType.HOURLY

    def test_falls_back_to_per_job(self):
        assert PayType.resolve(None, None) == PayType.PER_JOB


class TestUserRole:
    def test_manager_roles(self):
        assert UserRole.MANAGER.is_manager() is True
        assert UserRole.SUPER_MANAGER.is_manager() is True
        assert UserRole.CLEANER.is_manager() is False


class TestConflict:
    def test_gps_types(self):
        assert ConflictType.GPS_MISMATCH.is_gps() is True
        assert ConflictType.GPS_PRECISION_LOW.is_gps() is True
        assert ConflictType.GPS_INVALID.is_gps() is True
        assert ConflictType.MISSING_PHOTOS.is_gps() is False
        assert ConflictType.ACCESS_DENIED.is_gps() is False

    def test_to_dict_skips_empty_details(self):
        conflict = Conflict(type=ConflictType.ACCESS_DENIED, message="Locked out")
        assert conflict.to_dict() == {"type": "access_denied", "message": "Locked out"}

    def test_to_dict_includes_distance(self):
        conflict = Conflict(
            type=ConflictType.GPS_MISMATCH, message="Too far", distance=200.2
        )
        assert conflict.to_dict()["distance"] == 200.2

    def test_is_immutable(self):
        conflict = Conflict(type=ConflictType.MISSING_PHOTOS, message="No photos")
        with pytest.raises(AttributeError):
            conflict.message = "changed"


class TestJobEntity:
    """Test Job entity invariants."""

    def test_price_is_coerced_to_decimal(self):
        job = Job(business_id=uuid4(), property_id=uuid4(), price=150)
        assert job.price == Decimal("150")

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            Job(business_id=uuid4(), property_id=uuid4(), price=Decimal("-1"))

    def test_non_available_job_requires_cleaner(self):
        with pytest.raises(ValidationError, match="must have an assigned cleaner"):
            Job(
                business_id=uuid4(),
                property_id=uuid4(),
                price=Decimal("100"),
                status=JobStatus.ACCEPTED,
            )

    def test_available_job_cannot_keep_cleaner(self):
        with pytest.raises(ValidationError, match="cannot have an assigned cleaner"):
            Job(
                business_id=uuid4(),
                property_id=uuid4(),
                price=Decimal("100"),
                assigned_cleaner_id=uuid4(),
            )

    def test_ensure_transition_follows_table(self):
        job = Job(
            business_id=uuid4(),
            property_id=uuid4(),
            price=Decimal("100"),
            status=JobStatus.ACCEPTED,
            assigned_cleaner_id=uuid4(),
        )
        job.ensure_transition(JobStatus.IN_PROGRESS, "start")
        job.ensure_transition(JobStatus.AVAILABLE, "unassign")

        with pytest.raises(InvalidTransitionError):
            job.ensure_transition(JobStatus.COMPLETED, "complete")

    def test_completed_job_allows_no_transition(self):
        job = Job(
            business_id=uuid4(),
            property_id=uuid4(),
            price=Decimal("100"),
            status=JobStatus.COMPLETED,
            assigned_cleaner_id=uuid4(),
        )
        for target in JobStatus:
            with pytest.raises(InvalidTransitionError):
                job.ensure_transition(target, "override")

    def test_worked_minutes_rounds_half_up(self):
        started = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)
        job = Job(
            business_id=uuid4(),
            property_id=uuid4(),
            price=Decimal("50"),
            status=JobStatus.COMPLETED,
            assigned_cleaner_id=uuid4(),
            started_at=started,
            completed_at=started + timedelta(minutes=74, seconds=30),
        )
        assert job.worked_minutes() == 75

    def test_worked_minutes_without_timestamps(self):
        job = Job(business_id=uuid4(), property_id=uuid4(), price=Decimal("50"))
        assert job.worked_minutes() == 0


class TestInvoiceEntity:
    def _invoice(self, **kwargs):
        now = datetime(2025, 1, 6, tzinfo=timezone.utc)
        return Invoice(
            business_id=uuid4(),
            cleaner_id=uuid4(),
            pay_type=PayType.PER_JOB,
            period_start=now,
            period_end=now + timedelta(days=14),
            **kwargs,
        )

    def test_period_must_be_ordered(self):
        now = datetime(2025, 1, 6, tzinfo=timezone.utc)
        with pytest.raises(ValidationError):
            Invoice(
                business_id=uuid4(),
                cleaner_id=uuid4(),
                pay_type=PayType.PER_JOB,
                period_start=now,
                period_end=now - timedelta(days=1),
            )

    def test_computed_total_skips_voided_items(self):
        invoice = self._invoice()
        invoice.line_items = [
            InvoiceLineItem(
                invoice_id=invoice.id, job_id=uuid4(), amount=Decimal("150.00"),
                pay_type=PayType.PER_JOB,
            ),
            InvoiceLineItem(
                invoice_id=invoice.id, job_id=uuid4(), amount=Decimal("80.00"),
                pay_type=PayType.PER_JOB, is_voided=True, void_reason="Duplicate",
            ),
        ]
        assert invoice.computed_total() == Decimal("150.00")

    def test_voided_line_item_requires_reason(self):
        with pytest.raises(ValidationError):
            InvoiceLineItem(
                invoice_id=uuid4(), job_id=uuid4(), amount=Decimal("10"),
                pay_type=PayType.PER_JOB, is_voided=True,
            )

    def test_new_invoice_is_open(self):
        invoice = self._invoice()
        assert invoice.is_open() is True
        assert invoice.total_amount == Decimal("0.00")
