"""
Property repository implementation.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cleanops.application.interfaces.repositories import PropertyRepositoryInterface
from cleanops.domain.entities.property import Property
from cleanops.infrastructure.database.models.job import CleaningJobModel
from cleanops.infrastructure.database.models.property import PropertyModel


class PropertyRepository(PropertyRepositoryInterface):
    """Property repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, property: Property) -> Property:
        model = PropertyModel(
            id=property.id,
            business_id=property.business_id,
            name=property.name,
            address=property.address,
            latitude=property.latitude,
            longitude=property.longitude,
        )
        if property.created_at:
            model.created_at = property.created_at
            model.updated_at = property.updated_at or property.created_at
        self.db.add(model)
        await self.db.flush()
        return self._model_to_entity(model)

    async def get_by_id(self, property_id: UUID) -> Optional[Property]:
        stmt = select(PropertyModel).where(PropertyModel.id == property_id)
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def list_for_business(self, business_id: UUID) -> List[Property]:
        stmt = (
            select(PropertyModel)
            .where(PropertyModel.business_id == business_id)
            .order_by(PropertyModel.name, PropertyModel.id)
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def update(self, property: Property) -> bool:
        values = {
            "name": property.name,
            "address": property.address,
            "latitude": property.latitude,
            "longitude": property.longitude,
        }
        if property.updated_at:
            values["updated_at"] = property.updated_at

        stmt = (
            update(PropertyModel)
            .where(PropertyModel.id == property.id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def has_jobs(self, property_id: UUID) -> bool:
        stmt = select(exists().where(CleaningJobModel.property_id == property_id))
        result = await self.db.execute(stmt)
        return bool(result.scalar())

    async def delete(self, property_id: UUID) -> bool:
        stmt = (
            delete(PropertyModel)
            .where(PropertyModel.id == property_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    def _model_to_entity(self, model: PropertyModel) -> Property:
        return Property(
            id=model.id,
            business_id=model.business_id,
            name=model.name,
            address=model.address,
            latitude=float(model.latitude) if model.latitude is not None else None,
            longitude=float(model.longitude) if model.longitude is not None else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
