"""
Application services package.
"""

from .conflict_detector import ConflictDetector
from .gps_validator import GPSValidationResult, GPSValidator, haversine_distance
from .invoice_accrual import AccrualResult, InvoiceAccrualEngine
from .transactional_outbox import TransactionalOutbox

__all__ = [
    "AccrualResult",
    "ConflictDetector",
    "GPSValidationResult",
    "GPSValidator",
    "InvoiceAccrualEngine",
    "TransactionalOutbox",
    "haversine_distance",
]
