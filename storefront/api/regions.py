"""Region API endpoints.

Provides endpoints for region administration:
- GET /api/regions - list active regions
- POST /api/regions - create a region (admin)
- PUT/PATCH /api/regions/{id} - update a region (admin)
- DELETE /api/regions/{id} - delete a region (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from storefront.api.errors import to_http_exception
from storefront.api.schemas import (
    ErrorResponse,
    RegionEnvelope,
    RegionListEnvelope,
    RegionRequest,
    RegionSchema,
)
from storefront.catalog.documents import RegionDocument
from storefront.catalog.service import RegionService, get_region_service
from storefront.domain.exceptions import DomainError

router = APIRouter(prefix="/api/regions", tags=["Regions"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(request: Request) -> RegionService:
    """Get region service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_region_service(request_id=request_id)


def region_to_schema(region: RegionDocument) -> RegionSchema:
    """Convert RegionDocument to RegionSchema."""
    return RegionSchema.model_validate(region.to_dict())


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=RegionListEnvelope,
    summary="List regions",
    description="Active regions sorted by name.",
)
async def list_regions(
    service: Annotated[RegionService, Depends(get_service)],
) -> RegionListEnvelope:
    """List active regions."""
    regions = await service.list_regions()
    return RegionListEnvelope(data=[region_to_schema(r) for r in regions])


@router.post(
    "",
    response_model=RegionEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Create region",
)
async def create_region(
    body: RegionRequest,
    service: Annotated[RegionService, Depends(get_service)],
) -> RegionEnvelope:
    """Create a region.

    The slug is generated from the name when not supplied.

    Args:
        body: Region fields.
        service: Region service.

    Returns:
        Created region.

    Raises:
        HTTPException: If the name is missing or already taken.
    """
    try:
        region = await service.create_region(body.to_fields())
    except DomainError as e:
        raise to_http_exception(e) from e
    return RegionEnvelope(data=region_to_schema(region))


@router.api_route(
    "/{region_id}",
    methods=["PUT", "PATCH"],
    response_model=RegionEnvelope,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Update region",
)
async def update_region(
    region_id: str,
    body: RegionRequest,
    service: Annotated[RegionService, Depends(get_service)],
) -> RegionEnvelope:
    """Apply a partial update to a region.

    Args:
        region_id: Region identifier.
        body: Fields to change.
        service: Region service.

    Returns:
        Updated region.
    """
    try:
        region = await service.update_region(region_id, body.to_fields())
    except DomainError as e:
        raise to_http_exception(e) from e
    return RegionEnvelope(data=region_to_schema(region))


@router.delete(
    "/{region_id}",
    response_model=RegionEnvelope,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete region",
)
async def delete_region(
    region_id: str,
    service: Annotated[RegionService, Depends(get_service)],
) -> RegionEnvelope:
    """Delete a region, returning the deleted document."""
    try:
        region = await service.delete_region(region_id)
    except DomainError as e:
        raise to_http_exception(e) from e
    return RegionEnvelope(data=region_to_schema(region))
