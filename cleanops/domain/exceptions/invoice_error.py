"""
Invoice-related domain exceptions.
"""

from .domain_error import DomainError


class InvoiceLockedError(DomainError):
    """Raised when an invoice that is no longer open is asked to change."""

    def __init__(self, invoice_id: object, status: str, operation: str = "modify"):
        self.invoice_id = invoice_id
        self.status = status
        self.operation = operation
        super().__init__(
            f"Cannot {operation} invoice {invoice_id} with status '{status}'"
        )


class ImmutabilityViolationError(DomainError):
    """Raised by storage guards when an append-only record is altered."""

    def __init__(self, entity: str, entity_id: object, detail: str):
        self.entity = entity
        self.entity_id = entity_id
        self.detail = detail
        super().__init__(f"{entity} {entity_id} is immutable: {detail}")
