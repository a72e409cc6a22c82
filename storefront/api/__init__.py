"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from storefront.api.health import router as health_router
from storefront.api.products import router as products_router
from storefront.api.regions import router as regions_router

__all__ = [
    "health_router",
    "products_router",
    "regions_router",
]
