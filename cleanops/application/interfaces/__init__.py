"""
Application interfaces package.
"""

from .repositories import (
    InvoiceRepositoryInterface,
    JobRepositoryInterface,
    PropertyRepositoryInterface,
    UserRepositoryInterface,
)
from .services import EventPublisherInterface, PhotoStoreInterface

__all__ = [
    "EventPublisherInterface",
    "InvoiceRepositoryInterface",
    "JobRepositoryInterface",
    "PhotoStoreInterface",
    "PropertyRepositoryInterface",
    "UserRepositoryInterface",
]
