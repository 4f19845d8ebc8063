"""
FastAPI dependency injection container.
"""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from cleanops.application.services.gps_validator import GPSValidator
from cleanops.application.services.transactional_outbox import TransactionalOutbox
from cleanops.config.database import get_db_session
from cleanops.config.logging import get_logger
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.user import Actor
from cleanops.domain.value_objects.user_role import UserRole
from cleanops.infrastructure.database.repositories.invoice_repository import (
    InvoiceRepository,
)
from cleanops.infrastructure.database.repositories.job_repository import JobRepository
from cleanops.infrastructure.database.repositories.media_repository import (
    MediaRepository,
)
from cleanops.infrastructure.database.repositories.property_repository import (
    PropertyRepository,
)
from cleanops.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)
from cleanops.infrastructure.database.repositories.user_repository import (
    UserRepository,
)

logger = get_logger(__name__)


# Database Dependencies
async def get_job_repository(
    db: AsyncSession = Depends(get_db_session),
) -> JobRepository:
    """Get job repository instance."""
    return JobRepository(db)


async def get_user_repository(
    db: AsyncSession = Depends(get_db_session),
) -> UserRepository:
    """Get user repository instance."""
    return UserRepository(db)


async def get_property_repository(
    db: AsyncSession = Depends(get_db_session),
) -> PropertyRepository:
    """Get property repository instance."""
    return PropertyRepository(db)


async def get_invoice_repository(
    db: AsyncSession = Depends(get_db_session),
) -> InvoiceRepository:
    """Get invoice repository instance."""
    return InvoiceRepository(db)


async def get_media_repository(
    db: AsyncSession = Depends(get_db_session),
) -> MediaRepository:
    """Get media repository instance."""
    return MediaRepository(db)


async def get_transaction_service(
    db: AsyncSession = Depends(get_db_session),
) -> TransactionService:
    """Get transaction service instance."""
    return TransactionService(db)


# Service Dependencies
async def get_transactional_outbox(
    db: AsyncSession = Depends(get_db_session),
) -> TransactionalOutbox:
    """Get transactional outbox instance."""
    return TransactionalOutbox(db)


async def get_gps_validator() -> GPSValidator:
    """Get GPS validator instance."""
    return GPSValidator()


async def get_clock() -> Clock:
    """Get the time source."""
    return SystemClock()


async def get_actor(
    x_actor_id: Annotated[Optional[str], Header()] = None,
    x_actor_role: Annotated[Optional[str], Header()] = None,
    x_business_id: Annotated[Optional[str], Header()] = None,
) -> Actor:
    """
    Build the caller from the identity headers set by the auth gateway.
    """
    if not (x_actor_id and x_actor_role and x_business_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing actor identity headers",
        )

    try:
        return Actor(
            id=UUID(x_actor_id),
            role=UserRole(x_actor_role),
            business_id=UUID(x_business_id),
        )
    except ValueError:
        logger.warning(
            "Invalid actor identity headers",
            actor_id=x_actor_id,
            role=x_actor_role,
            business_id=x_business_id,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid actor identity headers",
        )


# Type aliases for cleaner dependency injection
JobRepositoryDep = Annotated[JobRepository, Depends(get_job_repository)]
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
PropertyRepositoryDep = Annotated[PropertyRepository, Depends(get_property_repository)]
InvoiceRepositoryDep = Annotated[InvoiceRepository, Depends(get_invoice_repository)]
MediaRepositoryDep = Annotated[MediaRepository, Depends(get_media_repository)]
TransactionServiceDep = Annotated[TransactionService, Depends(get_transaction_service)]
TransactionalOutboxDep = Annotated[TransactionalOutbox, Depends(get_transactional_outbox)]
GPSValidatorDep = Annotated[GPSValidator, Depends(get_gps_validator)]
ClockDep = Annotated[Clock, Depends(get_clock)]
ActorDep = Annotated[Actor, Depends(get_actor)]
