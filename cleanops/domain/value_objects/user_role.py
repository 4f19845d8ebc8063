"""
User role value object.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role of a platform user."""

    SUPER_MANAGER = "super_manager"
    MANAGER = "manager"
    CLEANER = "cleaner"

    def is_manager(self) -> bool:
        """Managers and super managers share override privileges."""
        return self in [UserRole.MANAGER, UserRole.SUPER_MANAGER]
