"""
Database repositories package.
"""

from .invoice_repository import InvoiceRepository
from .job_repository import JobRepository
from .media_repository import MediaRepository
from .property_repository import PropertyRepository
from .transaction_repository import TransactionService
from .user_repository import UserRepository

__all__ = [
    "InvoiceRepository",
    "JobRepository",
    "MediaRepository",
    "PropertyRepository",
    "TransactionService",
    "UserRepository",
]
