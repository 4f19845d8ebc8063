"""
Invoice and invoice line item SQLAlchemy models.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import relationship

from cleanops.domain.value_objects.invoice_status import InvoiceCycle, InvoiceStatus

from .base import BaseModel


class InvoiceModel(BaseModel):
    """Invoice database model."""

    __tablename__ = "invoices"

    business_id = Column(Uuid, nullable=False, index=True)
    cleaner_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    status = Column(String(20), default=InvoiceStatus.OPEN.value, nullable=False)
    invoice_cycle = Column(
        String(20), default=InvoiceCycle.BI_WEEKLY.value, nullable=False
    )
    pay_type = Column(String(20), nullable=False)
    period_start = Column(DateTime(timezone=True), nullable=False)
    period_end = Column(DateTime(timezone=True), nullable=False)
    total_amount = Column(Numeric(12, 2), default=0, nullable=False)
    submitted_at = Column(DateTime(timezone=True))
    approved_at = Column(DateTime(timezone=True))
    paid_at = Column(DateTime(timezone=True))

    line_items = relationship(
        "InvoiceLineItemModel",
        back_populates="invoice",
        order_by="InvoiceLineItemModel.created_at",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('open', 'submitted', 'approved', 'paid')", name="status"
        ),
        CheckConstraint("total_amount >= 0", name="total_non_negative"),
        CheckConstraint("period_end >= period_start", name="period_order"),
        # At most one open invoice per cleaner
        Index(
            "uq_invoices_one_open_per_cleaner",
            "cleaner_id",
            unique=True,
            postgresql_where=text("status = 'open'"),
            sqlite_where=text("status = 'open'"),
        ),
        Index("idx_invoices_cleaner_status", "cleaner_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, status={self.status}, total={self.total_amount})>"


class InvoiceLineItemModel(BaseModel):
    """Invoice line item database model. Append-only apart from soft-void."""

    __tablename__ = "invoice_line_items"

    invoice_id = Column(Uuid, ForeignKey("invoices.id"), nullable=False, index=True)
    job_id = Column(Uuid, ForeignKey("cleaning_jobs.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    pay_type = Column(String(20), nullable=False)
    duration_minutes = Column(Integer)
    is_voided = Column(Boolean, default=False, nullable=False)
    void_reason = Column(Text)
    voided_at = Column(DateTime(timezone=True))
    voided_by = Column(Uuid, ForeignKey("users.id"))

    invoice = relationship("InvoiceModel", back_populates="line_items")

    __table_args__ = (
        UniqueConstraint("invoice_id", "job_id", name="uq_line_item_invoice_job"),
        CheckConstraint("amount >= 0", name="amount_non_negative"),
        CheckConstraint(
            "is_voided = false OR (void_reason IS NOT NULL AND voided_at IS NOT NULL)",
            name="void_requires_reason",
        ),
    )

    def __repr__(self) -> str:
        return f"<InvoiceLineItem(id={self.id}, job_id={self.job_id}, amount={self.amount})>"
