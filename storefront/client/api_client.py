"""Storefront API Client.

Thin HTTP client for communicating with the Storefront REST API.
This module handles authentication, error handling, and envelope parsing.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from storefront.infrastructure.config import Settings, settings

logger = structlog.get_logger()


@dataclass
class APIError:
    """Represents an API error response."""

    error_code: str
    message: str
    status_code: int
    details: list[Any] = field(default_factory=list)


@dataclass
class APIResponse:
    """Represents an API response.

    ``data`` holds the envelope's ``data`` member on success.
    """

    success: bool
    data: dict[str, Any] | list[Any] | None = None
    error: APIError | None = None


class StorefrontAPIClient:
    """HTTP client for the Storefront REST API.

    Provides the catalog reads used by the browsing pages and the admin
    writes used by catalog tooling.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: Storefront API base URL.
            api_key: Admin API key, required for writes only.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> APIResponse:
        """Make an API request.

        Args:
            method: HTTP method.
            path: API endpoint path.
            json: Request body as JSON.
            params: Query parameters.

        Returns:
            APIResponse with success status and data or error.
        """
        client = await self._get_client()

        # Filter out None params
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            logger.debug(
                "Making API request",
                method=method,
                path=path,
                has_body=json is not None,
            )

            response = await client.request(
                method=method,
                url=path,
                json=json,
                params=params,
            )

            if response.status_code >= 400:
                error_data = response.json()
                return APIResponse(
                    success=False,
                    error=APIError(
                        error_code=error_data.get("error_code", "UNKNOWN_ERROR"),
                        message=error_data.get("message", "Unknown error"),
                        status_code=response.status_code,
                        details=error_data.get("details") or [],
                    ),
                )

            if response.status_code == 204:
                return APIResponse(success=True, data=None)

            body = response.json()
            return APIResponse(success=True, data=body.get("data"))

        except httpx.TimeoutException as e:
            logger.error("API request timeout", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="TIMEOUT",
                    message=f"Request timed out: {path}",
                    status_code=504,
                ),
            )
        except httpx.RequestError as e:
            logger.error("API request failed", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="REQUEST_ERROR",
                    message=f"Request failed: {str(e)}",
                    status_code=500,
                ),
            )
        except Exception as e:
            logger.exception("Unexpected API error", path=path)
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="INTERNAL_ERROR",
                    message=f"Internal error: {str(e)}",
                    status_code=500,
                ),
            )

    # =========================================================================
    # Product Endpoints
    # =========================================================================

    async def list_products(
        self,
        q: str | None = None,
        category: str | None = None,
        quantities: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        region: str | None = None,
        active: str | None = None,
        limit: int | None = None,
    ) -> APIResponse:
        """List product records.

        Args:
            q: Search text.
            category: Category filter (applied again client-side).
            quantities: Quantity label filter (applied again client-side).
            min_price: Lower price bound (applied again client-side).
            max_price: Upper price bound (applied again client-side).
            region: Region slug.
            active: "all" to include inactive products.
            limit: Maximum results.

        Returns:
            APIResponse with a list of product records.
        """
        return await self._request(
            method="GET",
            path="/api/products",
            params={
                "q": q or None,
                "category": category,
                "quantities": quantities,
                "minPrice": min_price,
                "maxPrice": max_price,
                "region": region,
                "active": active,
                "limit": limit,
            },
        )

    async def get_product(self, id_or_slug: str) -> APIResponse:
        """Get a product record by id or slug.

        Args:
            id_or_slug: Product identifier or slug.

        Returns:
            APIResponse with the product record.
        """
        return await self._request(
            method="GET",
            path=f"/api/products/{id_or_slug}",
        )

    async def create_product(self, fields: dict[str, Any]) -> APIResponse:
        """Create a product (admin)."""
        return await self._request(method="POST", path="/api/products", json=fields)

    async def update_product(self, product_id: str, fields: dict[str, Any]) -> APIResponse:
        """Partially update a product (admin)."""
        return await self._request(
            method="PATCH",
            path=f"/api/products/{product_id}",
            json=fields,
        )

    async def delete_product(self, product_id: str) -> APIResponse:
        """Delete a product (admin)."""
        return await self._request(method="DELETE", path=f"/api/products/{product_id}")

    # =========================================================================
    # Region Endpoints
    # =========================================================================

    async def list_regions(self) -> APIResponse:
        """List active regions.

        Returns:
            APIResponse with a list of regions sorted by name.
        """
        return await self._request(method="GET", path="/api/regions")

    async def create_region(self, fields: dict[str, Any]) -> APIResponse:
        """Create a region (admin)."""
        return await self._request(method="POST", path="/api/regions", json=fields)

    async def update_region(self, region_id: str, fields: dict[str, Any]) -> APIResponse:
        """Partially update a region (admin)."""
        return await self._request(
            method="PATCH",
            path=f"/api/regions/{region_id}",
            json=fields,
        )

    async def delete_region(self, region_id: str) -> APIResponse:
        """Delete a region (admin)."""
        return await self._request(method="DELETE", path=f"/api/regions/{region_id}")


def create_api_client(config: Settings = settings, api_key: str | None = None) -> StorefrontAPIClient:
    """Create an API client from settings.

    Args:
        config: Settings holding the API URL and timeout.
        api_key: Admin API key for catalog writes. Reads need none.

    Returns:
        Configured API client.
    """
    return StorefrontAPIClient(
        base_url=config.storefront_api_url,
        api_key=api_key,
        timeout=config.client_timeout,
    )
