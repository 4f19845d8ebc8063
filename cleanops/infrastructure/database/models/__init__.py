"""
Database models package.
"""

from .base import Base, BaseModel
from .invoice import InvoiceLineItemModel, InvoiceModel
from .job import CleaningJobModel
from .media import MediaModel
from .outbox_event import OutboxEventModel
from .property import PropertyModel
from .user import UserModel

__all__ = [
    "Base",
    "BaseModel",
    "CleaningJobModel",
    "InvoiceLineItemModel",
    "InvoiceModel",
    "MediaModel",
    "OutboxEventModel",
    "PropertyModel",
    "UserModel",
]
