"""
ORM guards for append-only invoice records.

Line items may only ever be soft-voided, never edited or deleted. Invoices
that left the open state keep their total and never move backwards.
A line item voided through the ORM is taken off its open invoice total.
The repositories already avoid these writes; these listeners catch anything
that slips past them through the ORM.
"""

from sqlalchemy import event, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import get_history

from cleanops.config.logging import get_logger
from cleanops.domain.exceptions.invoice_error import ImmutabilityViolationError
from cleanops.domain.value_objects.invoice_status import InvoiceStatus
from cleanops.infrastructure.database.models.invoice import (
    InvoiceLineItemModel,
    InvoiceModel,
)

logger = get_logger(__name__)

VOID_FIELDS = {"is_voided", "void_reason", "voided_at", "voided_by", "updated_at"}
STATUS_ORDER = [status.value for status in InvoiceStatus]


def _check_line_item_update(mapper, connection, target):
    changed = {
        attr.key
        for attr in mapper.column_attrs
        if get_history(target, attr.key).has_changes()
    }

    illegal = changed - VOID_FIELDS
    if illegal:
        logger.error(
            "Immutability violation blocked",
            entity="InvoiceLineItem",
            entity_id=str(target.id),
            fields=sorted(illegal),
        )
        raise ImmutabilityViolationError(
            "InvoiceLineItem", target.id, f"fields {sorted(illegal)} cannot change"
        )

    voided = get_history(target, "is_voided")
    if voided.deleted and voided.deleted[0] and not target.is_voided:
        raise ImmutabilityViolationError(
            "InvoiceLineItem", target.id, "a voided line item cannot be restored"
        )

    if voided.added and voided.added[0] and not (voided.deleted and voided.deleted[0]):
        _release_voided_amount(connection, target)


def _release_voided_amount(connection, target):
    """Take a line item voided through the ORM off its open invoice total."""
    invoices = InvoiceModel.__table__
    result = connection.execute(
        update(invoices)
        .where(
            invoices.c.id == target.invoice_id,
            invoices.c.status == InvoiceStatus.OPEN.value,
        )
        .values(total_amount=invoices.c.total_amount - target.amount)
    )
    if result.rowcount != 1:
        raise ImmutabilityViolationError(
            "InvoiceLineItem", target.id, "line items of a closed invoice cannot be voided"
        )


def _check_line_item_delete(mapper, connection, target):
    logger.error(
        "Immutability violation blocked",
        entity="InvoiceLineItem",
        entity_id=str(target.id),
        operation="DELETE",
    )
    raise ImmutabilityViolationError(
        "InvoiceLineItem", target.id, "line items are never deleted, void them instead"
    )


def _check_invoice_update(mapper, connection, target):
    status_history = get_history(target, "status")
    old_status = (
        status_history.deleted[0] if status_history.deleted else target.status
    )

    if status_history.deleted and status_history.added:
        new_status = status_history.added[0]
        if STATUS_ORDER.index(new_status) < STATUS_ORDER.index(old_status):
            raise ImmutabilityViolationError(
                "Invoice", target.id, f"status cannot move from {old_status} to {new_status}"
            )

    if old_status != InvoiceStatus.OPEN.value:
        if get_history(target, "total_amount").has_changes():
            raise ImmutabilityViolationError(
                "Invoice", target.id, f"total is locked once {old_status}"
            )


def _check_invoice_delete(mapper, connection, target):
    raise ImmutabilityViolationError("Invoice", target.id, "invoices are never deleted")


def _check_bulk_delete(orm_execute_state):
    """Block delete() statements aimed at invoices or line items."""
    if not orm_execute_state.is_delete:
        return
    mapper = orm_execute_state.bind_mapper
    if mapper is not None and mapper.class_ in (InvoiceModel, InvoiceLineItemModel):
        raise ImmutabilityViolationError(
            mapper.class_.__name__, None, "bulk deletes are not allowed"
        )


_LISTENERS = [
    (InvoiceLineItemModel, "before_update", _check_line_item_update),
    (InvoiceLineItemModel, "before_delete", _check_line_item_delete),
    (InvoiceModel, "before_update", _check_invoice_update),
    (InvoiceModel, "before_delete", _check_invoice_delete),
    (Session, "do_orm_execute", _check_bulk_delete),
]


def register_immutability_listeners() -> None:
    """Register the guards. Safe to call more than once."""
    for target, identifier, fn in _LISTENERS:
        if not event.contains(target, identifier, fn):
            event.listen(target, identifier, fn)
