"""Liveness and readiness endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from storefront.catalog.repository import get_product_repository, get_region_repository
from storefront.infrastructure.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness response with the number of stored documents."""

    status: str
    regions: int
    products: int


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service="storefront-api",
        version=settings.api_version,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """Report ready once the document stores are reachable."""
    return ReadinessResponse(
        status="ready",
        regions=len(get_region_repository()),
        products=len(get_product_repository()),
    )
