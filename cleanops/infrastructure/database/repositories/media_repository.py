"""
Media repository: photo records and the photo count seen by job completion.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cleanops.application.interfaces.repositories import PhotoRepositoryInterface
from cleanops.application.interfaces.services import PhotoStoreInterface
from cleanops.config.logging import get_logger
from cleanops.domain.entities.photo import Photo
from cleanops.infrastructure.database.models.media import MediaModel

logger = get_logger(__name__)


class MediaRepository(PhotoStoreInterface, PhotoRepositoryInterface):
    """Reads and writes media rows for images held by the upload service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def photo_count(self, job_id: UUID) -> int:
        """Count non-voided photos uploaded for a job."""
        stmt = select(func.count(MediaModel.id)).where(
            MediaModel.job_id == job_id,
            MediaModel.type == "photo",
            MediaModel.is_voided.is_(False),
        )
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    async def record(self, photo: Photo) -> Photo:
        model = MediaModel(
            id=photo.id,
            job_id=photo.job_id,
            type="photo",
            uri=photo.uri,
            room=photo.room,
            uploaded_by=photo.uploaded_by,
        )
        if photo.created_at:
            model.created_at = photo.created_at
            model.updated_at = photo.created_at
        self.db.add(model)
        await self.db.flush()
        return self._model_to_entity(model)

    async def get_by_id(self, photo_id: UUID) -> Optional[Photo]:
        stmt = select(MediaModel).where(
            MediaModel.id == photo_id, MediaModel.type == "photo"
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def list_for_job(self, job_id: UUID) -> List[Photo]:
        stmt = (
            select(MediaModel)
            .where(
                MediaModel.job_id == job_id,
                MediaModel.type == "photo",
                MediaModel.is_voided.is_(False),
            )
            .order_by(MediaModel.created_at, MediaModel.id)
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def void(self, photo_id: UUID) -> bool:
        stmt = (
            update(MediaModel)
            .where(MediaModel.id == photo_id, MediaModel.is_voided.is_(False))
            .values(is_voided=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            logger.warning("Photo void matched no rows", photo_id=str(photo_id))
            return False
        return True

    def _model_to_entity(self, model: MediaModel) -> Photo:
        return Photo(
            id=model.id,
            job_id=model.job_id,
            uri=model.uri,
            uploaded_by=model.uploaded_by,
            room=model.room,
            is_voided=model.is_voided,
            created_at=model.created_at,
        )
