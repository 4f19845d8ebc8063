"""
Domain entities package.
"""

from .invoice import Invoice, InvoiceLineItem
from .job import Job
from .photo import Photo
from .property import Property
from .user import Actor, User

__all__ = [
    "Actor",
    "Invoice",
    "InvoiceLineItem",
    "Job",
    "Photo",
    "Property",
    "User",
]
