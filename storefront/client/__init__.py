"""Storefront client.

HTTP client for the REST backend and the page controllers that feed
fetched records through the catalog pipeline.
"""

from storefront.client.api_client import (
    APIError,
    APIResponse,
    StorefrontAPIClient,
    create_api_client,
)
from storefront.client.pages import (
    FetchGeneration,
    Notice,
    ProductDetailPage,
    RegionPage,
    ShopPage,
    ShopState,
    page_size_for_viewport,
)

__all__ = [
    "APIError",
    "APIResponse",
    "StorefrontAPIClient",
    "create_api_client",
    "FetchGeneration",
    "Notice",
    "ProductDetailPage",
    "RegionPage",
    "ShopPage",
    "ShopState",
    "page_size_for_viewport",
]
