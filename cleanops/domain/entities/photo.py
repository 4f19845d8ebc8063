"""
Photo record domain entity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4


@dataclass
class Photo:
    """A photo taken during a job. The image itself lives in the photo store."""

    job_id: UUID
    uri: str
    id: UUID = field(default_factory=uuid4)
    uploaded_by: Optional[UUID] = None
    room: Optional[str] = None
    is_voided: bool = False
    created_at: Optional[datetime] = None
