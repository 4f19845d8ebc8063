"""
Invoice and invoice line item domain entities.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from uuid import UUID, uuid4

from cleanops.domain.exceptions.validation_error import ValidationError
from cleanops.domain.value_objects.invoice_status import InvoiceCycle, InvoiceStatus
from cleanops.domain.value_objects.pay_type import PayType


@dataclass
class InvoiceLineItem:
    """One completed job's contribution to an invoice."""

    invoice_id: UUID
    job_id: UUID
    amount: Decimal
    pay_type: PayType
    id: UUID = field(default_factory=uuid4)
    duration_minutes: Optional[int] = None
    is_voided: bool = False
    void_reason: Optional[str] = None
    voided_at: Optional[datetime] = None
    voided_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            self.amount = Decimal(str(self.amount))
        if self.amount < 0:
            raise ValidationError("Line item amount cannot be negative")
        if self.is_voided and not self.void_reason:
            raise ValidationError("Voided line items require a reason")
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    @property
    def effective_amount(self) -> Decimal:
        """Amount counted towards the invoice total."""
        return Decimal("0.00") if self.is_voided else self.amount


@dataclass
class Invoice:
    """Rolling invoice for one cleaner."""

    business_id: UUID
    cleaner_id: UUID
    pay_type: PayType
    period_start: datetime
    period_end: datetime
    id: UUID = field(default_factory=uuid4)
    status: InvoiceStatus = InvoiceStatus.OPEN
    invoice_cycle: InvoiceCycle = InvoiceCycle.BI_WEEKLY
    total_amount: Decimal = Decimal("0.00")
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    line_items: List[InvoiceLineItem] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.total_amount, Decimal):
            self.total_amount = Decimal(str(self.total_amount))
        if self.period_end < self.period_start:
            raise ValidationError("Invoice period cannot end before it starts")
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)
        if not self.updated_at:
            self.updated_at = self.created_at

    def is_open(self) -> bool:
        """Check if line items can still be appended or voided."""
        return self.status == InvoiceStatus.OPEN

    def computed_total(self) -> Decimal:
        """Sum of non-voided line items (requires line_items to be loaded)."""
        return sum(
            (item.effective_amount for item in self.line_items), Decimal("0.00")
        )
