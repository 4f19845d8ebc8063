"""Property management endpoints (managers)."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, status

from cleanops.api.dependencies import (
    ActorDep,
    ClockDep,
    GPSValidatorDep,
    PropertyRepositoryDep,
    TransactionServiceDep,
)
from cleanops.api.schemas.common import BaseResponse
from cleanops.api.schemas.property import (
    PropertyCreateRequest,
    PropertyResponse,
    PropertyUpdateRequest,
)
from cleanops.application.use_cases.properties import (
    CreatePropertyRequest,
    CreatePropertyUseCase,
    DeletePropertyUseCase,
    GetPropertyUseCase,
    ListPropertiesUseCase,
    UpdatePropertyUseCase,
)

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=List[PropertyResponse])
async def list_properties(actor: ActorDep, property_repository: PropertyRepositoryDep):
    properties = await ListPropertiesUseCase(property_repository).execute(actor)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    property_data: PropertyCreateRequest,
    actor: ActorDep,
    property_repository: PropertyRepositoryDep,
    transaction_service: TransactionServiceDep,
    gps_validator: GPSValidatorDep,
    clock: ClockDep,
):
    """Add a property. Without coordinates its jobs always go to review."""
    use_case = CreatePropertyUseCase(
        property_repo=property_repository,
        transaction_service=transaction_service,
        gps_validator=gps_validator,
        clock=clock,
    )
    property = await use_case.execute(
        CreatePropertyRequest(
            name=property_data.name,
            address=property_data.address,
            latitude=property_data.latitude,
            longitude=property_data.longitude,
        ),
        actor,
    )
    return PropertyResponse.model_validate(property)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: UUID, actor: ActorDep, property_repository: PropertyRepositoryDep
):
    property = await GetPropertyUseCase(property_repository).execute(property_id, actor)
    return PropertyResponse.model_validate(property)


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    body: PropertyUpdateRequest,
    actor: ActorDep,
    property_repository: PropertyRepositoryDep,
    transaction_service: TransactionServiceDep,
    gps_validator: GPSValidatorDep,
    clock: ClockDep,
):
    use_case = UpdatePropertyUseCase(
        property_repo=property_repository,
        transaction_service=transaction_service,
        gps_validator=gps_validator,
        clock=clock,
    )
    property = await use_case.execute(
        property_id, body.model_dump(exclude_unset=True), actor
    )
    return PropertyResponse.model_validate(property)


@router.delete("/{property_id}", response_model=BaseResponse)
async def delete_property(
    property_id: UUID,
    actor: ActorDep,
    property_repository: PropertyRepositoryDep,
    transaction_service: TransactionServiceDep,
):
    """Delete a property that has no jobs."""
    use_case = DeletePropertyUseCase(
        property_repo=property_repository, transaction_service=transaction_service
    )
    await use_case.execute(property_id, actor)
    return BaseResponse(message="Property deleted")
