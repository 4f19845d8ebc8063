"""
Invoice repository implementation.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cleanops.application.interfaces.repositories import InvoiceRepositoryInterface
from cleanops.config.logging import get_logger
from cleanops.domain.clock import ensure_utc
from cleanops.domain.entities.invoice import Invoice, InvoiceLineItem
from cleanops.domain.exceptions.invoice_error import InvoiceLockedError
from cleanops.domain.value_objects.invoice_status import InvoiceCycle, InvoiceStatus
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.infrastructure.database.models.invoice import (
    InvoiceLineItemModel,
    InvoiceModel,
)

logger = get_logger(__name__)

STATUS_TIMESTAMPS = {
    InvoiceStatus.SUBMITTED: "submitted_at",
    InvoiceStatus.APPROVED: "approved_at",
    InvoiceStatus.PAID: "paid_at",
}


class InvoiceRepository(InvoiceRepositoryInterface):
    """Invoice repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(
        self, invoice_id: UUID, with_line_items: bool = False
    ) -> Optional[Invoice]:
        """Get invoice by ID."""
        stmt = select(InvoiceModel).where(InvoiceModel.id == invoice_id)
        return await self._fetch_one(stmt, with_line_items)

    async def get_open_for_cleaner(
        self, cleaner_id: UUID, with_line_items: bool = False
    ) -> Optional[Invoice]:
        """Get the cleaner's open invoice, if any."""
        stmt = select(InvoiceModel).where(
            InvoiceModel.cleaner_id == cleaner_id,
            InvoiceModel.status == InvoiceStatus.OPEN.value,
        )
        return await self._fetch_one(stmt, with_line_items)

    async def get_or_create_open(self, invoice: Invoice) -> Invoice:
        """Return the open invoice for the cleaner, creating it if needed."""
        existing = await self.get_open_for_cleaner(invoice.cleaner_id)
        if existing:
            return existing

        try:
            async with self.db.begin_nested():
                await self.db.execute(
                    insert(InvoiceModel).values(
                        id=invoice.id,
                        business_id=invoice.business_id,
                        cleaner_id=invoice.cleaner_id,
                        status=InvoiceStatus.OPEN.value,
                        invoice_cycle=invoice.invoice_cycle.value,
                        pay_type=invoice.pay_type.value,
                        period_start=invoice.period_start,
                        period_end=invoice.period_end,
                        total_amount=invoice.total_amount,
                        created_at=invoice.created_at,
                        updated_at=invoice.updated_at,
                    )
                )
        except IntegrityError:
            # Lost the race against another transaction creating the same invoice
            existing = await self.get_open_for_cleaner(invoice.cleaner_id)
            if existing is None:
                raise
            logger.info(
                "Open invoice created concurrently, reusing it",
                invoice_id=str(existing.id),
                cleaner_id=str(invoice.cleaner_id),
            )
            return existing

        logger.info(
            "Open invoice created",
            invoice_id=str(invoice.id),
            cleaner_id=str(invoice.cleaner_id),
            pay_type=invoice.pay_type.value,
            period_end=invoice.period_end.isoformat(),
        )
        return invoice

    async def list_closed_for_cleaner(self, cleaner_id: UUID) -> List[Invoice]:
        """List non-open invoices, newest first."""
        stmt = (
            select(InvoiceModel)
            .where(
                InvoiceModel.cleaner_id == cleaner_id,
                InvoiceModel.status != InvoiceStatus.OPEN.value,
            )
            .order_by(InvoiceModel.period_start.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def update_status_if(
        self,
        invoice_id: UUID,
        expected_status: InvoiceStatus,
        new_status: InvoiceStatus,
        changed_at: datetime,
    ) -> bool:
        """Move an invoice to new_status only if it is still expected_status."""
        values = {"status": new_status.value}
        if new_status in STATUS_TIMESTAMPS:
            values[STATUS_TIMESTAMPS[new_status]] = changed_at

        stmt = (
            update(InvoiceModel)
            .where(
                InvoiceModel.id == invoice_id,
                InvoiceModel.status == expected_status.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def get_line_item(self, line_item_id: UUID) -> Optional[InvoiceLineItem]:
        stmt = (
            select(InvoiceLineItemModel)
            .where(InvoiceLineItemModel.id == line_item_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()
        return self._line_item_to_entity(model) if model else None

    async def find_line_item(
        self, invoice_id: UUID, job_id: UUID
    ) -> Optional[InvoiceLineItem]:
        stmt = (
            select(InvoiceLineItemModel)
            .where(
                InvoiceLineItemModel.invoice_id == invoice_id,
                InvoiceLineItemModel.job_id == job_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()
        return self._line_item_to_entity(model) if model else None

    async def append_line_item(self, line_item: InvoiceLineItem) -> bool:
        """Insert a line item and add its amount to the open invoice total."""
        try:
            async with self.db.begin_nested():
                await self.db.execute(
                    insert(InvoiceLineItemModel).values(
                        id=line_item.id,
                        invoice_id=line_item.invoice_id,
                        job_id=line_item.job_id,
                        amount=line_item.amount,
                        pay_type=line_item.pay_type.value,
                        duration_minutes=line_item.duration_minutes,
                        is_voided=False,
                        created_at=line_item.created_at,
                        updated_at=line_item.created_at,
                    )
                )
        except IntegrityError:
            if await self.find_line_item(line_item.invoice_id, line_item.job_id):
                return False
            raise

        result = await self.db.execute(
            update(InvoiceModel)
            .where(
                InvoiceModel.id == line_item.invoice_id,
                InvoiceModel.status == InvoiceStatus.OPEN.value,
            )
            .values(total_amount=InvoiceModel.total_amount + line_item.amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InvoiceLockedError(line_item.invoice_id, "not open", "append to")

        return True

    async def void_line_item(
        self,
        line_item: InvoiceLineItem,
        reason: str,
        voided_by: UUID,
        voided_at: datetime,
    ) -> bool:
        """Soft-void a line item and take its amount off the open invoice."""
        result = await self.db.execute(
            update(InvoiceLineItemModel)
            .where(
                InvoiceLineItemModel.id == line_item.id,
                InvoiceLineItemModel.is_voided.is_(False),
            )
            .values(
                is_voided=True,
                void_reason=reason,
                voided_at=voided_at,
                voided_by=voided_by,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        result = await self.db.execute(
            update(InvoiceModel)
            .where(
                InvoiceModel.id == line_item.invoice_id,
                InvoiceModel.status == InvoiceStatus.OPEN.value,
            )
            .values(total_amount=InvoiceModel.total_amount - line_item.amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InvoiceLockedError(line_item.invoice_id, "not open", "void a line item on")

        return True

    async def _fetch_one(self, stmt, with_line_items: bool) -> Optional[Invoice]:
        if with_line_items:
            stmt = stmt.options(selectinload(InvoiceModel.line_items))
        stmt = stmt.execution_options(populate_existing=True)

        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None

        return self._model_to_entity(model, with_line_items)

    def _model_to_entity(
        self, model: InvoiceModel, with_line_items: bool = False
    ) -> Invoice:
        """Convert model to entity."""
        return Invoice(
            id=model.id,
            business_id=model.business_id,
            cleaner_id=model.cleaner_id,
            status=InvoiceStatus(model.status),
            invoice_cycle=InvoiceCycle(model.invoice_cycle),
            pay_type=PayType(model.pay_type),
            period_start=ensure_utc(model.period_start),
            period_end=ensure_utc(model.period_end),
            total_amount=model.total_amount,
            submitted_at=ensure_utc(model.submitted_at),
            approved_at=ensure_utc(model.approved_at),
            paid_at=ensure_utc(model.paid_at),
            line_items=[self._line_item_to_entity(item) for item in model.line_items]
            if with_line_items
            else [],
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )

    def _line_item_to_entity(self, model: InvoiceLineItemModel) -> InvoiceLineItem:
        return InvoiceLineItem(
            id=model.id,
            invoice_id=model.invoice_id,
            job_id=model.job_id,
            amount=model.amount,
            pay_type=PayType(model.pay_type),
            duration_minutes=model.duration_minutes,
            is_voided=bool(model.is_voided),
            void_reason=model.void_reason,
            voided_at=ensure_utc(model.voided_at),
            voided_by=model.voided_by,
            created_at=ensure_utc(model.created_at),
        )
