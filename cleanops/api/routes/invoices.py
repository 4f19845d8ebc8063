"""Invoice endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter

from cleanops.api.dependencies import (
    ActorDep,
    ClockDep,
    InvoiceRepositoryDep,
    TransactionalOutboxDep,
    TransactionServiceDep,
)
from cleanops.api.schemas.invoice import (
    InvoiceResponse,
    LineItemResponse,
    VoidLineItemRequest,
)
from cleanops.application.use_cases.invoices import (
    ApproveInvoiceUseCase,
    GetCurrentInvoiceUseCase,
    GetInvoiceDetailUseCase,
    GetInvoiceHistoryUseCase,
    MarkInvoicePaidUseCase,
    SubmitInvoiceUseCase,
    VoidLineItemUseCase,
)

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("/current", response_model=InvoiceResponse)
async def get_current_invoice(actor: ActorDep, invoice_repository: InvoiceRepositoryDep):
    """The cleaner's open invoice, or a no_invoice placeholder."""
    invoice = await GetCurrentInvoiceUseCase(invoice_repository).execute(actor)
    return InvoiceResponse.from_entity(invoice)


@router.get("/history", response_model=List[InvoiceResponse])
async def get_invoice_history(actor: ActorDep, invoice_repository: InvoiceRepositoryDep):
    invoices = await GetInvoiceHistoryUseCase(invoice_repository).execute(actor)
    return [InvoiceResponse.from_entity(invoice) for invoice in invoices]


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: UUID, actor: ActorDep, invoice_repository: InvoiceRepositoryDep
):
    invoice = await GetInvoiceDetailUseCase(invoice_repository).execute(invoice_id, actor)
    return InvoiceResponse.from_entity(invoice)


@router.post("/{invoice_id}/submit", response_model=InvoiceResponse)
async def submit_invoice(
    invoice_id: UUID,
    actor: ActorDep,
    invoice_repository: InvoiceRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    clock: ClockDep,
):
    """Submit an open invoice for approval; it can no longer change."""
    use_case = SubmitInvoiceUseCase(invoice_repository, outbox, transaction_service, clock)
    invoice = await use_case.execute(invoice_id, actor)
    return InvoiceResponse.from_entity(invoice)


@router.post("/{invoice_id}/approve", response_model=InvoiceResponse)
async def approve_invoice(
    invoice_id: UUID,
    actor: ActorDep,
    invoice_repository: InvoiceRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    clock: ClockDep,
):
    use_case = ApproveInvoiceUseCase(invoice_repository, outbox, transaction_service, clock)
    invoice = await use_case.execute(invoice_id, actor)
    return InvoiceResponse.from_entity(invoice)


@router.post("/{invoice_id}/paid", response_model=InvoiceResponse)
async def mark_invoice_paid(
    invoice_id: UUID,
    actor: ActorDep,
    invoice_repository: InvoiceRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    clock: ClockDep,
):
    use_case = MarkInvoicePaidUseCase(invoice_repository, outbox, transaction_service, clock)
    invoice = await use_case.execute(invoice_id, actor)
    return InvoiceResponse.from_entity(invoice)


@router.post("/line-items/{line_item_id}/void", response_model=LineItemResponse)
async def void_line_item(
    line_item_id: UUID,
    body: VoidLineItemRequest,
    actor: ActorDep,
    invoice_repository: InvoiceRepositoryDep,
    outbox: TransactionalOutboxDep,
    transaction_service: TransactionServiceDep,
    clock: ClockDep,
):
    """Void a line item on an open invoice (managers)."""
    use_case = VoidLineItemUseCase(invoice_repository, outbox, transaction_service, clock)
    line_item = await use_case.execute(line_item_id, body.reason, actor)
    return LineItemResponse.model_validate(line_item)
