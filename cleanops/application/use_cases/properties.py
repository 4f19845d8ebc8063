"""
Property management use cases.

Managers keep the list of properties their business cleans. A property's
coordinates are what job completion is verified against, so they are
range-checked on every write.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional
from uuid import UUID

from cleanops.application.interfaces.repositories import PropertyRepositoryInterface
from cleanops.application.services.access_policy import load_property, require_manager
from cleanops.application.services.gps_validator import GPSValidator
from cleanops.config.logging import get_logger
from cleanops.domain.clock import Clock, SystemClock
from cleanops.domain.entities.property import Property
from cleanops.domain.entities.user import Actor
from cleanops.domain.exceptions.domain_error import ConflictError, NotFoundError
from cleanops.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)

logger = get_logger(__name__)

EDITABLE_FIELDS = frozenset({"name", "address", "latitude", "longitude"})


@dataclass
class CreatePropertyRequest:
    """Request for adding a property."""

    name: str
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class ListPropertiesUseCase:
    """List the properties of the manager's business."""

    def __init__(self, property_repo: PropertyRepositoryInterface):
        self.property_repo = property_repo

    async def execute(self, actor: Actor) -> List[Property]:
        require_manager(actor, "view properties")
        return await self.property_repo.list_for_business(actor.business_id)


class GetPropertyUseCase:
    def __init__(self, property_repo: PropertyRepositoryInterface):
        self.property_repo = property_repo

    async def execute(self, property_id: UUID, actor: Actor) -> Property:
        require_manager(actor, "view properties")
        return await load_property(self.property_repo, property_id, actor)


class CreatePropertyUseCase:
    """Add a property to the manager's business."""

    def __init__(
        self,
        property_repo: PropertyRepositoryInterface,
        transaction_service: TransactionService,
        gps_validator: Optional[GPSValidator] = None,
        clock: Optional[Clock] = None,
    ):
        self.property_repo = property_repo
        self.transaction_service = transaction_service
        self.gps_validator = gps_validator or GPSValidator()
        self.clock = clock or SystemClock()

    async def execute(self, request: CreatePropertyRequest, actor: Actor) -> Property:
        require_manager(actor, "create properties")

        now = self.clock.now()
        property = Property(
            business_id=actor.business_id,
            name=request.name.strip(),
            address=request.address,
            latitude=request.latitude,
            longitude=request.longitude,
            created_at=now,
            updated_at=now,
        )
        if property.has_coordinates():
            self.gps_validator.ensure_in_range(property.latitude, property.longitude)

        async def operation() -> Property:
            return await self.property_repo.create(property)

        created = await self.transaction_service.execute_in_transaction(
            operation, name="create_property"
        )

        logger.info(
            "Property created",
            property_id=str(created.id),
            has_coordinates=created.has_coordinates(),
            manager_id=str(actor.id),
        )
        return created


class UpdatePropertyUseCase:
    """
    Change some fields of a property.

    Only the fields present in changes are touched; passing latitude and
    longitude as None removes the location. Jobs already finished keep the
    verification result they got.
    """

    def __init__(
        self,
        property_repo: PropertyRepositoryInterface,
        transaction_service: TransactionService,
        gps_validator: Optional[GPSValidator] = None,
        clock: Optional[Clock] = None,
    ):
        self.property_repo = property_repo
        self.transaction_service = transaction_service
        self.gps_validator = gps_validator or GPSValidator()
        self.clock = clock or SystemClock()

    async def execute(
        self, property_id: UUID, changes: Dict[str, Any], actor: Actor
    ) -> Property:
        require_manager(actor, "update properties")

        changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        if isinstance(changes.get("name"), str):
            changes["name"] = changes["name"].strip()

        async def operation() -> Property:
            property = await load_property(self.property_repo, property_id, actor)
            updated = replace(property, updated_at=self.clock.now(), **changes)
            if updated.has_coordinates():
                self.gps_validator.ensure_in_range(updated.latitude, updated.longitude)

            if not await self.property_repo.update(updated):
                raise NotFoundError("Property", property_id)
            return updated

        property = await self.transaction_service.execute_in_transaction(
            operation, name="update_property"
        )

        logger.info(
            "Property updated",
            property_id=str(property.id),
            fields=sorted(changes),
            manager_id=str(actor.id),
        )
        return property


class DeletePropertyUseCase:
    """Remove a property that never had a job posted for it."""

    def __init__(
        self,
        property_repo: PropertyRepositoryInterface,
        transaction_service: TransactionService,
    ):
        self.property_repo = property_repo
        self.transaction_service = transaction_service

    async def execute(self, property_id: UUID, actor: Actor) -> None:
        require_manager(actor, "delete properties")

        async def operation() -> None:
            property = await load_property(self.property_repo, property_id, actor)
            # Jobs and invoice line items keep pointing at the property
            if await self.property_repo.has_jobs(property.id):
                raise ConflictError(
                    "Property has jobs and cannot be deleted", entity_id=property.id
                )
            if not await self.property_repo.delete(property.id):
                raise NotFoundError("Property", property_id)

        await self.transaction_service.execute_in_transaction(
            operation, name="delete_property"
        )

        logger.info(
            "Property deleted", property_id=str(property_id), manager_id=str(actor.id)
        )
