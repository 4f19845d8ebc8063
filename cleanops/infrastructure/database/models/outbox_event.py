"""
Outbox event SQLAlchemy model.
"""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text

from .base import BaseModel


class OutboxEventModel(BaseModel):
    """Outbox event database model."""

    __tablename__ = "outbox_events"

    event_type = Column(String(50), nullable=False)
    aggregate_id = Column(String(64), nullable=False, index=True)
    business_id = Column(String(64), nullable=False)
    audience = Column(JSON, nullable=False, default=list)
    event_data = Column(JSON, nullable=False)
    status = Column(String(20), default="pending", nullable=False)
    retry_count = Column(Integer, default=0, nullable=False)
    processed_at = Column(DateTime(timezone=True))
    error_message = Column(Text)

    __table_args__ = (Index("idx_outbox_events_status_created", "status", "created_at"),)
