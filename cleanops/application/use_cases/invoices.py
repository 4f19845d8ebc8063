"""Invoice use cases: cleaner views, submission, approval, payment and voiding."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID

from cleanops.application.interfaces.repositories import InvoiceRepositoryInterface
from cleanops.application.interfaces.services import EventPublisherInterface
from cleanops.application.services.access_policy import require_cleaner, require_manager
from cleanops.config.logging import get_logger
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.invoice import Invoice, InvoiceLineItem
from cleanops.domain.entities.user import Actor
from cleanops.domain.events import (
    InvoiceApproved,
    InvoicePaid,
    InvoiceSubmitted,
    LineItemVoided,
)
from cleanops.domain.exceptions.domain_error import ConflictError, NotFoundError
from cleanops.domain.exceptions.invoice_error import InvoiceLockedError
from cleanops.domain.exceptions.transition_error import InvalidTransitionError
from cleanops.domain.exceptions.validation_error import ValidationError
from cleanops.domain.value_objects.invoice_status import InvoiceStatus
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from cleanops.infrastructure.monitoring.metrics import (
    record_invoice_transition,
    record_manager_override,
)

logger = get_logger(__name__)


@dataclass
class NoInvoice:
    """Placeholder returned when a cleaner has nothing accrued yet."""

    id: Optional[UUID] = None
    status: str = "no_invoice"
    total_amount: Decimal = Decimal("0.00")
    pay_type: PayType = PayType.PER_JOB
    line_items: List[InvoiceLineItem] = field(default_factory=list)


async def _load_invoice(
    invoice_repo: InvoiceRepositoryInterface,
    invoice_id: UUID,
    actor: Actor,
    with_line_items: bool = False,
) -> Invoice:
    """Owner cleaners and managers of the business may see an invoice."""
    invoice = await invoice_repo.get_by_id(invoice_id, with_line_items=with_line_items)
    if not invoice or invoice.business_id != actor.business_id:
        raise NotFoundError("Invoice", invoice_id)
    if not actor.is_manager() and invoice.cleaner_id != actor.id:
        raise NotFoundError("Invoice", invoice_id)
    return invoice


class GetCurrentInvoiceUseCase:
    """The cleaner's open invoice with its line items."""

    def __init__(self, invoice_repo: InvoiceRepositoryInterface):
        self.invoice_repo = invoice_repo

    async def execute(self, actor: Actor) -> Union[Invoice, NoInvoice]:
        require_cleaner(actor, "view their current invoice")
        invoice = await self.invoice_repo.get_open_for_cleaner(
            actor.id, with_line_items=True
        )
        return invoice or NoInvoice()


class GetInvoiceHistoryUseCase:
    """The cleaner's submitted, approved and paid invoices, newest first."""

    def __init__(self, invoice_repo: InvoiceRepositoryInterface):
        self.invoice_repo = invoice_repo

    async def execute(self, actor: Actor) -> List[Invoice]:
        require_cleaner(actor, "view their invoice history")
        return await self.invoice_repo.list_closed_for_cleaner(actor.id)


class GetInvoiceDetailUseCase:
    def __init__(self, invoice_repo: InvoiceRepositoryInterface):
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: UUID, actor: Actor) -> Invoice:
        return await _load_invoice(
            self.invoice_repo, invoice_id, actor, with_line_items=True
        )


class _InvoiceTransitionUseCase:
    """Moves an invoice one step along open -> submitted -> approved -> paid."""

    target_status: InvoiceStatus
    action = ""
    timestamp_field = ""

    def __init__(
        self,
        invoice_repo: InvoiceRepositoryInterface,
        publisher: EventPublisherInterface,
        transaction_service: TransactionService,
        clock: Optional[Clock] = None,
    ):
        self.invoice_repo = invoice_repo
        self.publisher = publisher
        self.transaction_service = transaction_service
        self.clock = clock or SystemClock()

    def _authorize(self, actor: Actor) -> None:
        require_manager(actor, f"{self.action} invoices")

    def _event(self, invoice: Invoice, actor: Actor, now: datetime):
        raise NotImplementedError

    async def execute(self, invoice_id: UUID, actor: Actor) -> Invoice:
        self._authorize(actor)

        async def operation() -> Invoice:
            invoice = await _load_invoice(self.invoice_repo, invoice_id, actor)
            if invoice.status.next_status() != self.target_status:
                raise InvalidTransitionError(
                    invoice.status.value,
                    self.action,
                    f"Cannot {self.action} invoice with status '{invoice.status.value}'",
                )

            now = self.clock.now()
            moved = await self.invoice_repo.update_status_if(
                invoice.id, invoice.status, self.target_status, now
            )
            if not moved:
                raise ConflictError(
                    "Invoice status changed, please try again", entity_id=invoice.id
                )

            updated = replace(
                invoice,
                status=self.target_status,
                updated_at=now,
                **{self.timestamp_field: now},
            )
            await self.publisher.publish(self._event(updated, actor, now))
            return updated

        invoice = await self.transaction_service.execute_in_transaction(
            operation, name=f"{self.action}_invoice"
        )

        record_invoice_transition(self.target_status.value)
        logger.info(
            "Invoice status changed",
            invoice_id=str(invoice.id),
            cleaner_id=str(invoice.cleaner_id),
            status=invoice.status.value,
            actor_id=str(actor.id),
        )
        return invoice


class SubmitInvoiceUseCase(_InvoiceTransitionUseCase):
    """Cleaner submits their open invoice; it is locked from then on."""

    target_status = InvoiceStatus.SUBMITTED
    action = "submit"
    timestamp_field = "submitted_at"

    def _authorize(self, actor: Actor) -> None:
        require_cleaner(actor, "submit invoices")

    def _event(self, invoice, actor, now):
        return InvoiceSubmitted(
            invoice_id=invoice.id,
            business_id=invoice.business_id,
            cleaner_id=invoice.cleaner_id,
            total_amount=invoice.total_amount,
            occurred_at=now,
        )


class ApproveInvoiceUseCase(_InvoiceTransitionUseCase):
    target_status = InvoiceStatus.APPROVED
    action = "approve"
    timestamp_field = "approved_at"

    def _event(self, invoice, actor, now):
        return InvoiceApproved(
            invoice_id=invoice.id,
            business_id=invoice.business_id,
            cleaner_id=invoice.cleaner_id,
            manager_id=actor.id,
            occurred_at=now,
        )


class MarkInvoicePaidUseCase(_InvoiceTransitionUseCase):
    target_status = InvoiceStatus.PAID
    action = "pay"
    timestamp_field = "paid_at"

    def _event(self, invoice, actor, now):
        return InvoicePaid(
            invoice_id=invoice.id,
            business_id=invoice.business_id,
            cleaner_id=invoice.cleaner_id,
            manager_id=actor.id,
            occurred_at=now,
        )


class VoidLineItemUseCase:
    """
    Manager voids a line item on an open invoice.

    The row is kept with its void reason and the invoice total drops by its
    amount. Submitted invoices cannot be touched.
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepositoryInterface,
        publisher: EventPublisherInterface,
        transaction_service: TransactionService,
        clock: Optional[Clock] = None,
    ):
        self.invoice_repo = invoice_repo
        self.publisher = publisher
        self.transaction_service = transaction_service
        self.clock = clock or SystemClock()

    async def execute(
        self, line_item_id: UUID, reason: str, actor: Actor
    ) -> InvoiceLineItem:
        require_manager(actor, "void invoice line items")
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A reason is required to void a line item")

        async def operation() -> InvoiceLineItem:
            line_item = await self.invoice_repo.get_line_item(line_item_id)
            if not line_item:
                raise NotFoundError("Line item", line_item_id)

            invoice = await _load_invoice(self.invoice_repo, line_item.invoice_id, actor)
            if not invoice.is_open():
                raise InvoiceLockedError(invoice.id, invoice.status.value, "void a line item on")
            if line_item.is_voided:
                raise ValidationError(f"Line item {line_item.id} is already voided")

            now = self.clock.now()
            if not await self.invoice_repo.void_line_item(line_item, reason, actor.id, now):
                raise ConflictError(
                    "Line item was voided concurrently", entity_id=line_item.id
                )

            await self.publisher.publish(
                LineItemVoided(
                    line_item_id=line_item.id,
                    invoice_id=invoice.id,
                    business_id=invoice.business_id,
                    cleaner_id=invoice.cleaner_id,
                    manager_id=actor.id,
                    amount=line_item.amount,
                    reason=reason,
                    occurred_at=now,
                )
            )
            return replace(
                line_item,
                is_voided=True,
                void_reason=reason,
                voided_at=now,
                voided_by=actor.id,
            )

        voided = await self.transaction_service.execute_in_transaction(
            operation, name="void_line_item"
        )

        record_manager_override("void_line_item")
        logger.info(
            "Line item voided",
            line_item_id=str(voided.id),
            invoice_id=str(voided.invoice_id),
            amount=str(voided.amount),
            manager_id=str(actor.id),
        )
        return voided
