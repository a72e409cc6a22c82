"""Product API endpoints.

Provides endpoints for the product catalog:
- GET /api/products - list products (newest first)
- GET /api/products/{id_or_slug} - product record
- POST /api/products - create a product (admin)
- PUT/PATCH /api/products/{id} - update a product (admin)
- DELETE /api/products/{id} - delete a product (admin)
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request, status

from storefront.api.errors import to_http_exception
from storefront.api.schemas import (
    ErrorResponse,
    ProductCreateRequest,
    ProductEnvelope,
    ProductListEnvelope,
    ProductUpdateRequest,
)
from storefront.catalog.service import ProductService, get_product_service
from storefront.domain.exceptions import DomainError

logger = structlog.get_logger()

router = APIRouter(prefix="/api/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(request: Request) -> ProductService:
    """Get product service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_product_service(request_id=request_id)


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListEnvelope,
    summary="List products",
    description=(
        "Products newest first. Category, quantity and price parameters are "
        "accepted for compatibility; browsing pages apply them client-side."
    ),
)
async def list_products(
    service: Annotated[ProductService, Depends(get_service)],
    q: str | None = Query(default=None, description="Search title, description and category"),
    region: str | None = Query(default=None, description="Region slug"),
    active: str | None = Query(default=None, description="'all' includes inactive products"),
    limit: int = Query(default=200, ge=1, le=500, description="Maximum results"),
    category: str | None = Query(default=None),
    quantities: str | None = Query(default=None),
    min_price: float | None = Query(default=None, alias="minPrice"),
    max_price: float | None = Query(default=None, alias="maxPrice"),
) -> ProductListEnvelope:
    """List products.

    Args:
        service: Product service.
        q: Search text.
        region: Region slug to match exactly.
        active: "all" to include inactive products.
        limit: Maximum results.
        category: Ignored here.
        quantities: Ignored here.
        min_price: Ignored here.
        max_price: Ignored here.

    Returns:
        Product records.
    """
    if category or quantities or min_price is not None or max_price is not None:
        logger.debug(
            "Ignoring client-side filters",
            category=category,
            quantities=quantities,
            min_price=min_price,
            max_price=max_price,
        )

    products = await service.list_products(
        region=region,
        include_inactive=(active or "").lower() == "all",
        search=q,
        limit=limit,
    )
    data = [product.to_dict() for product in products]
    return ProductListEnvelope(data=data, total=len(data))


@router.get(
    "/{id_or_slug}",
    response_model=ProductEnvelope,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
    description="Look a product up by id or by slug.",
)
async def get_product(
    id_or_slug: str,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductEnvelope:
    """Get a product by id or slug.

    Raises:
        HTTPException: If no product matches.
    """
    try:
        product = await service.get_product(id_or_slug)
    except DomainError as e:
        raise to_http_exception(e) from e
    return ProductEnvelope(data=product.to_dict())


@router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
    summary="Create product",
)
async def create_product(
    body: ProductCreateRequest,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductEnvelope:
    """Create a product.

    Args:
        body: Product fields.
        service: Product service.

    Returns:
        Created product record.
    """
    try:
        product = await service.create_product(body.to_fields())
    except DomainError as e:
        raise to_http_exception(e) from e
    return ProductEnvelope(data=product.to_dict())


@router.api_route(
    "/{product_id}",
    methods=["PUT", "PATCH"],
    response_model=ProductEnvelope,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update product",
)
async def update_product(
    product_id: str,
    body: ProductUpdateRequest,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductEnvelope:
    """Apply a partial update to a product."""
    try:
        product = await service.update_product(product_id, body.to_fields())
    except DomainError as e:
        raise to_http_exception(e) from e
    return ProductEnvelope(data=product.to_dict())


@router.delete(
    "/{product_id}",
    response_model=ProductEnvelope,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete product",
)
async def delete_product(
    product_id: str,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductEnvelope:
    """Delete a product, returning the deleted record."""
    try:
        product = await service.delete_product(product_id)
    except DomainError as e:
        raise to_http_exception(e) from e
    return ProductEnvelope(data=product.to_dict())
