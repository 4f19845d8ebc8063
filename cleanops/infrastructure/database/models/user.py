"""
User SQLAlchemy model.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, String, Uuid

from .base import BaseModel


class UserModel(BaseModel):
    """User database model."""

    __tablename__ = "users"

    business_id = Column(Uuid, nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    role = Column(String(20), nullable=False)
    pay_type = Column(String(20))
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "role IN ('super_manager', 'manager', 'cleaner')", name="role"
        ),
        CheckConstraint(
            "pay_type IS NULL OR pay_type IN ('hourly', 'per_job')", name="pay_type"
        ),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role})>"
