"""
Invoice-related API schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from cleanops.domain.value_objects.pay_type import PayType


class LineItemResponse(BaseModel):
    """Invoice line item schema."""

    id: UUID
    invoice_id: UUID
    job_id: UUID
    amount: Decimal
    pay_type: PayType
    duration_minutes: Optional[int] = None
    is_voided: bool = False
    void_reason: Optional[str] = None
    voided_at: Optional[datetime] = None
    voided_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class InvoiceResponse(BaseModel):
    """
    Invoice schema.

    A cleaner with nothing accrued gets status "no_invoice" with no id.
    """

    id: Optional[UUID] = None
    business_id: Optional[UUID] = None
    cleaner_id: Optional[UUID] = None
    status: str
    pay_type: PayType
    invoice_cycle: Optional[str] = None
    total_amount: Decimal
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    line_items: List[LineItemResponse] = []

    model_config = {"from_attributes": True}

    @classmethod
    def from_entity(cls, invoice) -> "InvoiceResponse":
        cycle = getattr(invoice, "invoice_cycle", None)
        return cls(
            id=invoice.id,
            business_id=getattr(invoice, "business_id", None),
            cleaner_id=getattr(invoice, "cleaner_id", None),
            status=getattr(invoice.status, "value", invoice.status),
            pay_type=invoice.pay_type,
            invoice_cycle=cycle.value if cycle else None,
            total_amount=invoice.total_amount,
            period_start=getattr(invoice, "period_start", None),
            period_end=getattr(invoice, "period_end", None),
            submitted_at=getattr(invoice, "submitted_at", None),
            approved_at=getattr(invoice, "approved_at", None),
            paid_at=getattr(invoice, "paid_at", None),
            line_items=[
                LineItemResponse.model_validate(item) for item in invoice.line_items
            ],
        )


class VoidLineItemRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)
