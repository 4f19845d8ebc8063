"""
Service interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from cleanops.domain.events import DomainEvent


class PhotoStoreInterface(ABC):
    """Read-only view of the media attached to a job."""

    @abstractmethod
    async def photo_count(self, job_id: UUID) -> int:
        """Count non-voided photos uploaded for a job."""
        pass


class EventPublisherInterface(ABC):
    """Interface for publishing lifecycle events to notification consumers."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Record an event within the current transaction."""
        pass
