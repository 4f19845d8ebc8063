"""
Job photo API schemas.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PhotoCreateRequest(BaseModel):
    """Photo record request. Without a uri a placeholder location is assigned."""

    uri: Optional[str] = Field(None, min_length=1, max_length=2000)
    room: Optional[str] = Field(None, max_length=100)


class PhotoResponse(BaseModel):
    id: UUID
    job_id: UUID
    uri: str
    room: Optional[str] = None
    uploaded_by: Optional[UUID] = None
    created_at: datetime

    model_config = {"from_attributes": True}
