"""
User repository implementation.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanops.application.interfaces.repositories import UserRepositoryInterface
from cleanops.domain.entities.user import User
from cleanops.domain.value_objects.pay_type import PayType
from cleanops.domain.value_objects.user_role import UserRole
from cleanops.infrastructure.database.models.user import UserModel


class UserRepository(UserRepositoryInterface):
    """User repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user: User) -> User:
        model = UserModel(
            id=user.id,
            business_id=user.business_id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            pay_type=user.pay_type.value if user.pay_type else None,
            is_active=user.is_active,
        )
        self.db.add(model)
        await self.db.flush()
        return self._model_to_entity(model)

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    def _model_to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            business_id=model.business_id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            role=UserRole(model.role),
            pay_type=PayType(model.pay_type) if model.pay_type else None,
            is_active=model.is_active,
        )
