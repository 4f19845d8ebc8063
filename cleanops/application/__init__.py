"""
Application layer package.

This package contains use cases, services, and interfaces that implement
the business logic of the application.
"""

from .interfaces.repositories import (
    InvoiceRepositoryInterface,
    JobRepositoryInterface,
    PhotoRepositoryInterface,
    PropertyRepositoryInterface,
    UserRepositoryInterface,
)
from .interfaces.services import EventPublisherInterface, PhotoStoreInterface

__all__ = [
    # Interfaces
    "EventPublisherInterface",
    "InvoiceRepositoryInterface",
    "JobRepositoryInterface",
    "PhotoRepositoryInterface",
    "PhotoStoreInterface",
    "PropertyRepositoryInterface",
    "UserRepositoryInterface",
]
