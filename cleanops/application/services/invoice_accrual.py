"""
Invoice accrual: turns a completed job into exactly one invoice line item.
"""

from dataclasses import dataclass
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Tuple

from cleanops.application.interfaces.repositories import (
    InvoiceRepositoryInterface,
    UserRepositoryInterface,
)
from cleanops.config.logging import get_logger
from cleanops.config.settings import settings
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.invoice import Invoice, InvoiceLineItem
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.user import User
from cleanops.domain.exceptions.domain_error import NotFoundError
from cleanops.domain.exceptions.validation_error import ValidationError
from cleanops.domain.value_objects.invoice_status import InvoiceCycle
from cleanops.domain.value_objects.job_status import JobStatus
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.infrastructure.monitoring.metrics import record_line_item_accrued

logger = get_logger(__name__)

CENTS = Decimal("0.01")


def effective_pay_type(job: Job, cleaner: Optional[User]) -> PayType:
    """Job override first, then the cleaner's default, then per-job."""
    return PayType.resolve(job.pay_type_override, cleaner.pay_type if cleaner else None)


def round_to_increment(minutes: int, increment: int = 30) -> int:
    """Round minutes half-up to the nearest increment (15 -> 30, 75 -> 90)."""
    if minutes <= 0:
        return 0
    steps = (Decimal(minutes) / Decimal(increment)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return int(steps) * increment


def compute_line_item_amount(
    job: Job, pay_type: PayType, increment: Optional[int] = None
) -> Tuple[Decimal, Optional[int]]:
    """
    Return (amount, billed_minutes) for a job.

    Per-job pay is the job price. Hourly pay bills the worked minutes rounded
    to the configured increment at the job price per hour.
    """
    if pay_type == PayType.PER_JOB:
        return job.price.quantize(CENTS, rounding=ROUND_HALF_UP), None

    increment = increment or settings.HOURLY_ROUNDING_MINUTES
    billed_minutes = round_to_increment(job.worked_minutes(), increment)
    amount = (job.price * Decimal(billed_minutes) / Decimal(60)).quantize(
        CENTS, rounding=ROUND_HALF_UP
    )
    return amount, billed_minutes


@dataclass
class AccrualResult:
    """Result of accruing a job to an invoice."""

    invoice: Invoice
    line_item: InvoiceLineItem
    created: bool


class InvoiceAccrualEngine:
    """Appends a completed job to its cleaner's open invoice."""

    def __init__(
        self,
        invoice_repo: InvoiceRepositoryInterface,
        user_repo: UserRepositoryInterface,
        clock: Optional[Clock] = None,
    ):
        self.invoice_repo = invoice_repo
        self.user_repo = user_repo
        self.clock = clock or SystemClock()

    async def accrue(self, job: Job) -> AccrualResult:
        """
        Record the job's pay on the cleaner's open invoice.

        Must run in the same transaction that moved the job to completed.
        Calling it again for the same job returns the existing line item.
        """
        if job.status != JobStatus.COMPLETED:
            raise ValidationError(
                f"Only completed jobs can be invoiced, job {job.id} is '{job.status.value}'"
            )
        if not job.assigned_cleaner_id:
            raise ValidationError(f"Job {job.id} has no assigned cleaner to invoice")

        cleaner = await self.user_repo.get_by_id(job.assigned_cleaner_id)
        if not cleaner:
            raise NotFoundError("Cleaner", job.assigned_cleaner_id)

        pay_type = effective_pay_type(job, cleaner)
        amount, billed_minutes = compute_line_item_amount(job, pay_type)

        now = self.clock.now()
        invoice = await self.invoice_repo.get_or_create_open(
            Invoice(
                business_id=job.business_id,
                cleaner_id=cleaner.id,
                pay_type=pay_type,
                invoice_cycle=InvoiceCycle(settings.INVOICE_CYCLE),
                period_start=now,
                period_end=now + timedelta(days=settings.INVOICE_PERIOD_DAYS),
            )
        )

        existing = await self.invoice_repo.find_line_item(invoice.id, job.id)
        if existing:
            logger.info(
                "Job already accrued, skipping",
                job_id=str(job.id),
                invoice_id=str(invoice.id),
                line_item_id=str(existing.id),
            )
            return AccrualResult(invoice=invoice, line_item=existing, created=False)

        line_item = InvoiceLineItem(
            invoice_id=invoice.id,
            job_id=job.id,
            amount=amount,
            pay_type=pay_type,
            duration_minutes=billed_minutes,
            created_at=now,
        )

        if not await self.invoice_repo.append_line_item(line_item):
            # Another transaction appended the same job first
            existing = await self.invoice_repo.find_line_item(invoice.id, job.id)
            return AccrualResult(invoice=invoice, line_item=existing, created=False)

        invoice.total_amount = invoice.total_amount + amount
        record_line_item_accrued(pay_type.value)

        logger.info(
            "Job accrued to invoice",
            job_id=str(job.id),
            invoice_id=str(invoice.id),
            cleaner_id=str(cleaner.id),
            pay_type=pay_type.value,
            amount=str(amount),
            billed_minutes=billed_minutes,
        )

        return AccrualResult(invoice=invoice, line_item=line_item, created=True)
