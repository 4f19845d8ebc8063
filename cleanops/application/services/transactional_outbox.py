"""
Transactional outbox: lifecycle events are written in the same transaction
as the state change that produced them, for notification delivery to pick up.
"""

import dataclasses
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, assert_never
from uuid import UUID, uuid4

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanops.application.interfaces.services import EventPublisherInterface
from cleanops.config.logging import get_logger
from cleanops.domain.events import (
    AccessDenied,
    ConflictResolved,
    DomainEvent,
    InvoiceApproved,
    InvoicePaid,
    InvoiceSubmitted,
    JobAccepted,
    JobAvailable,
    JobCompleted,
    JobNeedsReview,
    JobOverrideCompleted,
    JobReassigned,
    JobReset,
    JobStarted,
    LineItemVoided,
)
from cleanops.domain.value_objects.user_role import UserRole
from cleanops.infrastructure.database.models.outbox_event import OutboxEventModel

logger = get_logger(__name__)


class OutboxEventType(str, Enum):
    """Types of outbox events."""

    JOB_AVAILABLE = "job_available"
    JOB_ACCEPTED = "job_accepted"
    JOB_STARTED = "job_started"
    JOB_COMPLETED = "job_completed"
    JOB_NEEDS_REVIEW = "job_needs_review"
    JOB_REASSIGNED = "job_reassigned"
    JOB_RESET = "job_reset"
    ACCESS_DENIED = "access_denied"
    JOB_OVERRIDE_COMPLETED = "job_override_completed"
    CONFLICT_RESOLVED = "conflict_resolved"
    INVOICE_SUBMITTED = "invoice_submitted"
    INVOICE_APPROVED = "invoice_approved"
    INVOICE_PAID = "invoice_paid"
    LINE_ITEM_VOIDED = "line_item_voided"


class OutboxEventStatus(str, Enum):
    """Status of outbox events."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class OutboxEvent:
    """Outbox event for transactional operations."""

    id: UUID
    event_type: OutboxEventType
    aggregate_id: str
    business_id: str
    audience: List[str]
    event_data: Dict[str, Any]
    status: OutboxEventStatus = OutboxEventStatus.PENDING
    created_at: Optional[datetime] = None


def _role(role: UserRole) -> str:
    return f"role:{role.value}"


def _user(user_id: Optional[UUID]) -> List[str]:
    return [f"user:{user_id}"] if user_id else []


def route_event(event: DomainEvent) -> Tuple[OutboxEventType, UUID, List[str]]:
    """Return the outbox type, aggregate id and audience for an event."""
    managers = [_role(UserRole.MANAGER), _role(UserRole.SUPER_MANAGER)]

    match event:
        case JobAvailable():
            return OutboxEventType.JOB_AVAILABLE, event.job_id, [_role(UserRole.CLEANER)]
        case JobAccepted():
            return OutboxEventType.JOB_ACCEPTED, event.job_id, managers
        case JobStarted():
            return OutboxEventType.JOB_STARTED, event.job_id, managers
        case JobCompleted():
            return OutboxEventType.JOB_COMPLETED, event.job_id, managers
        case JobNeedsReview():
            return OutboxEventType.JOB_NEEDS_REVIEW, event.job_id, managers
        case JobReassigned():
            audience = _user(event.previous_cleaner_id) + _user(event.new_cleaner_id)
            return OutboxEventType.JOB_REASSIGNED, event.job_id, audience
        case JobReset():
            audience = _user(event.previous_cleaner_id) + [_role(UserRole.CLEANER)]
            return OutboxEventType.JOB_RESET, event.job_id, audience
        case AccessDenied():
            return OutboxEventType.ACCESS_DENIED, event.job_id, managers
        case JobOverrideCompleted():
            return (
                OutboxEventType.JOB_OVERRIDE_COMPLETED,
                event.job_id,
                _user(event.cleaner_id),
            )
        case ConflictResolved():
            return OutboxEventType.CONFLICT_RESOLVED, event.job_id, _user(event.cleaner_id)
        case InvoiceSubmitted():
            return OutboxEventType.INVOICE_SUBMITTED, event.invoice_id, managers
        case InvoiceApproved():
            return OutboxEventType.INVOICE_APPROVED, event.invoice_id, _user(event.cleaner_id)
        case InvoicePaid():
            return OutboxEventType.INVOICE_PAID, event.invoice_id, _user(event.cleaner_id)
        case LineItemVoided():
            return OutboxEventType.LINE_ITEM_VOIDED, event.invoice_id, _user(event.cleaner_id)
        case _:
            assert_never(event)


def _to_json(value: Any) -> Any:
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    return value


def serialize_event(event: DomainEvent) -> Dict[str, Any]:
    """Flatten an event dataclass into JSON-safe values."""
    return {
        field.name: _to_json(getattr(event, field.name))
        for field in dataclasses.fields(event)
    }


class TransactionalOutbox(EventPublisherInterface):
    """Transactional Outbox service for atomic operations."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.logger = logger

    async def publish(self, event: DomainEvent) -> None:
        """Write the event to the outbox inside the caller's transaction."""
        event_type, aggregate_id, audience = route_event(event)
        await self.create_event(
            event_type=event_type,
            aggregate_id=str(aggregate_id),
            business_id=str(event.business_id),
            audience=audience,
            event_data=serialize_event(event),
        )

    async def create_event(
        self,
        event_type: OutboxEventType,
        aggregate_id: str,
        business_id: str,
        audience: List[str],
        event_data: Dict[str, Any],
    ) -> OutboxEvent:
        """
        Create an outbox event within the current transaction.

        This method should be called within a database transaction to ensure
        atomicity between the main operation and the event creation.
        """
        event = OutboxEvent(
            id=uuid4(),
            event_type=event_type,
            aggregate_id=aggregate_id,
            business_id=business_id,
            audience=audience,
            event_data=event_data,
            created_at=datetime.now(timezone.utc),
        )

        await self.db_session.execute(
            insert(OutboxEventModel).values(
                id=event.id,
                event_type=event.event_type.value,
                aggregate_id=event.aggregate_id,
                business_id=event.business_id,
                audience=event.audience,
                event_data=event.event_data,
                status=event.status.value,
                created_at=event.created_at,
            )
        )

        self.logger.info(
            "Outbox event created",
            event_id=str(event.id),
            event_type=event.event_type.value,
            aggregate_id=event.aggregate_id,
            audience=event.audience,
        )

        return event

    async def get_pending_events(
        self, aggregate_id: Optional[str] = None, limit: int = 100
    ) -> List[OutboxEvent]:
        """Get pending events, oldest first."""
        stmt = select(OutboxEventModel).where(
            OutboxEventModel.status == OutboxEventStatus.PENDING.value
        )
        if aggregate_id:
            stmt = stmt.where(OutboxEventModel.aggregate_id == aggregate_id)
        stmt = stmt.order_by(OutboxEventModel.created_at.asc()).limit(limit)

        result = await self.db_session.execute(stmt)

        return [
            OutboxEvent(
                id=model.id,
                event_type=OutboxEventType(model.event_type),
                aggregate_id=model.aggregate_id,
                business_id=model.business_id,
                audience=list(model.audience or []),
                event_data=model.event_data,
                status=OutboxEventStatus(model.status),
                created_at=model.created_at,
            )
            for model in result.scalars().all()
        ]
