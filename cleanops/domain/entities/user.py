"""
User and actor domain entities.
"""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID, uuid4

from cleanops.domain.value_objects.pay_type import PayType
from cleanops.domain.value_objects.user_role import UserRole


@dataclass
class User:
    """Platform user (cleaner, manager or super manager)."""

    business_id: UUID
    role: UserRole
    email: str
    id: UUID = field(default_factory=uuid4)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    pay_type: Optional[PayType] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return " ".join(part for part in [self.first_name, self.last_name] if part)

    def is_cleaner(self) -> bool:
        return self.role == UserRole.CLEANER


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of an operation."""

    id: UUID
    role: UserRole
    business_id: UUID

    def is_manager(self) -> bool:
        return self.role.is_manager()

    def is_cleaner(self) -> bool:
        return self.role == UserRole.CLEANER
