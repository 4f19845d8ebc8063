"""
Invoice domain events.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class InvoiceSubmitted:
    """Event raised when a cleaner submits an open invoice."""

    invoice_id: UUID
    business_id: UUID
    cleaner_id: UUID
    total_amount: Decimal
    occurred_at: datetime


@dataclass(frozen=True)
class InvoiceApproved:
    """Event raised when a manager approves a submitted invoice."""

    invoice_id: UUID
    business_id: UUID
    cleaner_id: UUID
    manager_id: UUID
    occurred_at: datetime


@dataclass(frozen=True)
class InvoicePaid:
    """Event raised when an approved invoice is marked paid."""

    invoice_id: UUID
    business_id: UUID
    cleaner_id: UUID
    manager_id: UUID
    occurred_at: datetime


@dataclass(frozen=True)
class LineItemVoided:
    """Event raised when a manager voids a line item on an open invoice."""

    line_item_id: UUID
    invoice_id: UUID
    business_id: UUID
    cleaner_id: UUID
    manager_id: UUID
    amount: Decimal
    reason: str
    occurred_at: datetime
