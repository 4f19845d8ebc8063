"""
Base domain exceptions shared by every operation.
"""

from typing import Optional


class DomainError(Exception):
    """Base exception for all domain errors."""

    pass


class NotFoundError(DomainError):
    """Raised when an id does not resolve inside the caller's business."""

    def __init__(self, entity: str, entity_id: Optional[object] = None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"{entity} not found")
        else:
            super().__init__(f"{entity} {entity_id} not found")


class ForbiddenError(DomainError):
    """Raised when the caller's role or assignment does not allow an operation."""

    def __init__(self, message: str = "Operation not permitted for this user"):
        super().__init__(message)


class ConflictError(DomainError):
    """Raised when a conditional update lost a race with another writer."""

    def __init__(self, message: str, entity_id: Optional[object] = None):
        self.entity_id = entity_id
        super().__init__(message)
