"""
Repository interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from cleanops.domain.entities.invoice import Invoice, InvoiceLineItem
from cleanops.domain.entities.job import Job
from cleanops.domain.entities.photo import Photo
from cleanops.domain.entities.property import Property
from cleanops.domain.entities.user import User
from cleanops.domain.value_objects.invoice_status import InvoiceStatus
from cleanops.domain.value_objects.job_status import JobStatus


class JobRepositoryInterface(ABC):
    """Cleaning job repository interface."""

    @abstractmethod
    async def create(self, job: Job) -> Job:
        """Create a new job."""
        pass

    @abstractmethod
    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID."""
        pass

    @abstractmethod
    async def list_for_business(
        self,
        business_id: UUID,
        status: Optional[JobStatus] = None,
        visible_to_cleaner_id: Optional[UUID] = None,
        limit: int = 100,
    ) -> List[Job]:
        """
        List jobs of a business.

        When visible_to_cleaner_id is given only unassigned jobs and jobs held
        by that cleaner are returned.
        """
        pass

    @abstractmethod
    async def update_if_status(self, job: Job, expected_status: JobStatus) -> bool:
        """
        Persist the job's mutable fields only if the stored status still equals
        expected_status. Returns False when no row matched.
        """
        pass


class UserRepositoryInterface(ABC):
    """User repository interface."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        pass


class PropertyRepositoryInterface(ABC):
    """Property repository interface."""

    @abstractmethod
    async def create(self, property: Property) -> Property:
        """Create a new property."""
        pass

    @abstractmethod
    async def get_by_id(self, property_id: UUID) -> Optional[Property]:
        """Get property by ID."""
        pass

    @abstractmethod
    async def list_for_business(self, business_id: UUID) -> List[Property]:
        """List the properties of a business, by name."""
        pass

    @abstractmethod
    async def update(self, property: Property) -> bool:
        """Persist the editable fields. Returns False when the row is gone."""
        pass

    @abstractmethod
    async def has_jobs(self, property_id: UUID) -> bool:
        """Check if any job was ever posted for the property."""
        pass

    @abstractmethod
    async def delete(self, property_id: UUID) -> bool:
        """Delete the property. Returns False when the row is gone."""
        pass


class InvoiceRepositoryInterface(ABC):
    """Invoice and line item repository interface."""

    @abstractmethod
    async def get_by_id(
        self, invoice_id: UUID, with_line_items: bool = False
    ) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    async def get_open_for_cleaner(
        self, cleaner_id: UUID, with_line_items: bool = False
    ) -> Optional[Invoice]:
        """Get the cleaner's open invoice, if any."""
        pass

    @abstractmethod
    async def get_or_create_open(self, invoice: Invoice) -> Invoice:
        """
        Return the cleaner's open invoice, inserting the given one if there is
        none. A concurrent insert by another transaction is resolved by
        returning the row that won.
        """
        pass

    @abstractmethod
    async def list_closed_for_cleaner(self, cleaner_id: UUID) -> List[Invoice]:
        """List submitted, approved and paid invoices, newest first."""
        pass

    @abstractmethod
    async def update_status_if(
        self,
        invoice_id: UUID,
        expected_status: InvoiceStatus,
        new_status: InvoiceStatus,
        changed_at: datetime,
    ) -> bool:
        """Conditionally move an invoice to its next status."""
        pass

    @abstractmethod
    async def get_line_item(self, line_item_id: UUID) -> Optional[InvoiceLineItem]:
        """Get line item by ID."""
        pass

    @abstractmethod
    async def find_line_item(
        self, invoice_id: UUID, job_id: UUID
    ) -> Optional[InvoiceLineItem]:
        """Get the line item recorded for a job on an invoice."""
        pass

    @abstractmethod
    async def append_line_item(self, line_item: InvoiceLineItem) -> bool:
        """
        Insert the line item and add its amount to the invoice total.

        Returns False when a line item for the same (invoice, job) already
        exists. Raises InvoiceLockedError when the invoice is no longer open.
        """
        pass

    @abstractmethod
    async def void_line_item(
        self, line_item: InvoiceLineItem, reason: str, voided_by: UUID, voided_at: datetime
    ) -> bool:
        """Soft-void a line item and subtract it from the open invoice total."""
        pass


class PhotoRepositoryInterface(ABC):
    """Photo records attached to jobs."""

    @abstractmethod
    async def record(self, photo: Photo) -> Photo:
        """Record a photo already held by the photo store."""
        pass

    @abstractmethod
    async def get_by_id(self, photo_id: UUID) -> Optional[Photo]:
        """Get photo record by ID."""
        pass

    @abstractmethod
    async def list_for_job(self, job_id: UUID) -> List[Photo]:
        """List non-voided photos of a job, oldest first."""
        pass

    @abstractmethod
    async def void(self, photo_id: UUID) -> bool:
        """Hide a photo from the job. Returns False when it was already voided."""
        pass
