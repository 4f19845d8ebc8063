"""
Invoice status value object.
"""

from enum import Enum
from typing import Optional


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status enumeration."""

    OPEN = "open"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    PAID = "paid"

    def is_locked(self) -> bool:
        """Submitted and later invoices can no longer change amount."""
        return self != InvoiceStatus.OPEN

    def next_status(self) -> Optional["InvoiceStatus"]:
        """Return the only status this invoice may move to, if any."""
        order = list(InvoiceStatus)
        index = order.index(self)
        return order[index + 1] if index + 1 < len(order) else None


class InvoiceCycle(str, Enum):
    """Billing period for rolling invoices."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"
