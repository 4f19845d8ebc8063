"""
Media SQLAlchemy model.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, String, Text, Uuid

from .base import BaseModel


class MediaModel(BaseModel):
    """Photo or video uploaded against a job."""

    __tablename__ = "media"

    job_id = Column(Uuid, ForeignKey("cleaning_jobs.id"), nullable=False, index=True)
    type = Column(String(10), nullable=False)
    uri = Column(Text, nullable=False)
    room = Column(String(100))
    uploaded_by = Column(Uuid, ForeignKey("users.id"))
    is_voided = Column(Boolean, default=False, nullable=False)

    __table_args__ = (CheckConstraint("type IN ('photo', 'video')", name="type"),)
