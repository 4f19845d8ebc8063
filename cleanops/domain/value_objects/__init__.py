"""
Domain value objects package.
"""

from .conflict import Conflict, ConflictType
from .invoice_status import InvoiceCycle, InvoiceStatus
from .job_status import JobStatus
from .pay_type import PayType
from .user_role import UserRole

__all__ = [
    "Conflict",
    "ConflictType",
    "InvoiceCycle",
    "InvoiceStatus",
    "JobStatus",
    "PayType",
    "UserRole",
]
