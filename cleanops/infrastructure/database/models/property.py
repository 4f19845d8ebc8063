"""
Property SQLAlchemy model.
"""

from sqlalchemy import Column, Numeric, String, Text, Uuid

from .base import BaseModel


class PropertyModel(BaseModel):
    """Property database model."""

    __tablename__ = "properties"

    business_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text)
    latitude = Column(Numeric(10, 7, asdecimal=False))
    longitude = Column(Numeric(10, 7, asdecimal=False))

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name})>"
