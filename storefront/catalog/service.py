"""Catalog application services.

Business rules for region and product administration:
- Payload cleaning (trimmed strings, coerced flags)
- Name and slug uniqueness
- Slug generation
"""

from datetime import datetime, timezone
from typing import Any

import structlog

from storefront.catalog.documents import ProductDocument, RegionDocument
from storefront.catalog.repository import (
    ProductRepository,
    RegionRepository,
    get_product_repository,
    get_region_repository,
)
from storefront.catalog.text import slugify
from storefront.domain.exceptions import (
    DuplicateRegionError,
    ProductNotFoundError,
    RegionNotFoundError,
    ValidationError,
)

logger = structlog.get_logger()

# Product fields that may be cleared by setting them to null
NULLABLE_PRODUCT_FIELDS = frozenset({"discount", "region", "description", "image_url"})


def build_region_payload(body: dict[str, Any] | None) -> dict[str, Any]:
    """Clean the region fields present in a request body.

    Only supplied keys are kept. Strings are trimmed and ``active`` is
    coerced to a bool.

    Args:
        body: Raw request fields (snake_case).

    Returns:
        Cleaned updates.
    """
    body = body or {}
    payload: dict[str, Any] = {}
    if "name" in body and body["name"] is not None:
        payload["name"] = str(body["name"]).strip()
    if "description" in body:
        payload["description"] = str(body["description"] or "").strip()
    if "active" in body:
        payload["active"] = bool(body["active"])
    if "slug" in body:
        payload["slug"] = str(body["slug"] or "").strip()
    if "image_url" in body:
        payload["image_url"] = str(body["image_url"] or "").strip()
    return payload


class RegionService:
    """Application service for regions."""

    def __init__(
        self,
        repository: RegionRepository | None = None,
        request_id: str | None = None,
    ) -> None:
        self.repository = repository or get_region_repository()
        self.request_id = request_id
        self._log = logger.bind(request_id=request_id)

    async def list_regions(self) -> list[RegionDocument]:
        """List active regions sorted by name."""
        return self.repository.list_all(active_only=True)

    async def get_region(self, region_id: str) -> RegionDocument:
        """Get a region by id.

        Raises:
            RegionNotFoundError: If the region does not exist.
        """
        region = self.repository.get(region_id)
        if region is None:
            raise RegionNotFoundError(region_id)
        return region

    async def create_region(self, body: dict[str, Any]) -> RegionDocument:
        """Create a region.

        Args:
            body: Raw request fields.

        Returns:
            Created region.

        Raises:
            ValidationError: If the name is missing or blank.
            DuplicateRegionError: If the name or slug is taken.
        """
        name = body.get("name")
        if not name:
            raise ValidationError("Missing name", field="name")
        trimmed_name = str(name).strip()
        if not trimmed_name:
            raise ValidationError("Name cannot be empty", field="name")

        if self.repository.find_by_name(trimmed_name) is not None:
            raise DuplicateRegionError(trimmed_name)

        payload = build_region_payload(body)
        payload["name"] = trimmed_name
        slug = payload.pop("slug", "") or slugify(trimmed_name)
        if self.repository.slug_taken(slug):
            raise DuplicateRegionError(trimmed_name, by_slug=True)

        region = RegionDocument(
            name=trimmed_name,
            slug=slug,
            description=payload.get("description"),
            active=payload.get("active", True),
            image_url=payload.get("image_url"),
        )
        self.repository.save(region)

        self._log.info("Region created", region_id=region.id, slug=region.slug)
        return region

    async def update_region(self, region_id: str, body: dict[str, Any]) -> RegionDocument:
        """Apply a partial update to a region.

        An empty slug is regenerated from the name.

        Raises:
            RegionNotFoundError: If the region does not exist.
            ValidationError: If the name is blank.
            DuplicateRegionError: If the new name or slug is taken.
        """
        region = await self.get_region(region_id)
        updates = build_region_payload(body)
        self._log.debug("Region update payload", region_id=region_id, updates=updates)

        if "name" in updates:
            if not updates["name"]:
                raise ValidationError("Name cannot be empty", field="name")
            if self.repository.find_by_name(updates["name"], exclude_id=region.id):
                raise DuplicateRegionError(updates["name"])

        if "slug" in updates and not updates["slug"]:
            updates["slug"] = slugify(updates.get("name", region.name))
        if "slug" in updates and self.repository.slug_taken(updates["slug"], exclude_id=region.id):
            raise DuplicateRegionError(updates.get("name", region.name), by_slug=True)

        for key, value in updates.items():
            setattr(region, key, value)
        region.updated_at = datetime.now(timezone.utc)
        self.repository.save(region)

        self._log.info("Region updated", region_id=region.id, fields=sorted(updates))
        return region

    async def delete_region(self, region_id: str) -> RegionDocument:
        """Delete a region.

        Raises:
            RegionNotFoundError: If the region does not exist.
        """
        region = self.repository.delete(region_id)
        if region is None:
            raise RegionNotFoundError(region_id)
        self._log.info("Region deleted", region_id=region_id)
        return region


class ProductService:
    """Application service for products."""

    def __init__(
        self,
        repository: ProductRepository | None = None,
        request_id: str | None = None,
    ) -> None:
        self.repository = repository or get_product_repository()
        self.request_id = request_id
        self._log = logger.bind(request_id=request_id)

    async def list_products(
        self,
        region: str | None = None,
        include_inactive: bool = False,
        search: str | None = None,
        limit: int = 200,
    ) -> list[ProductDocument]:
        """List products newest first.

        Category, quantity and price filters are applied by the browsing
        pages, not here.
        """
        products = self.repository.find_all(
            region=region,
            include_inactive=include_inactive,
            search=search.strip() if search else None,
            limit=limit,
        )
        self._log.debug(
            "Products listed",
            region=region,
            search=search,
            count=len(products),
        )
        return products

    async def get_product(self, id_or_slug: str) -> ProductDocument:
        """Get a product by id or slug.

        Raises:
            ProductNotFoundError: If no product matches.
        """
        product = self.repository.get(id_or_slug) or self.repository.get_by_slug(id_or_slug)
        if product is None:
            raise ProductNotFoundError(id_or_slug)
        return product

    def _unique_slug(self, source: str, exclude_id: str | None = None) -> str:
        base = slugify(source) or "product"
        slug = base
        suffix = 2
        while self.repository.slug_taken(slug, exclude_id=exclude_id):
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    async def create_product(self, fields: dict[str, Any]) -> ProductDocument:
        """Create a product.

        Args:
            fields: Validated product fields (snake_case).

        Returns:
            Created product.

        Raises:
            ValidationError: If the title is blank.
        """
        title = str(fields.get("title") or "").strip()
        if not title:
            raise ValidationError("Missing title", field="title")

        values = {k: v for k, v in fields.items() if v is not None}
        values["title"] = title
        values["slug"] = self._unique_slug(values.get("slug") or title)

        product = ProductDocument(**values)
        self.repository.save(product)

        self._log.info("Product created", product_id=product.id, slug=product.slug)
        return product

    async def update_product(self, product_id: str, fields: dict[str, Any]) -> ProductDocument:
        """Apply a partial update to a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
            ValidationError: If the title is set blank.
        """
        product = self.repository.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        updates = {
            key: value
            for key, value in fields.items()
            if value is not None or key in NULLABLE_PRODUCT_FIELDS
        }
        if "title" in updates:
            updates["title"] = str(updates["title"] or "").strip()
            if not updates["title"]:
                raise ValidationError("Missing title", field="title")
        if "slug" in updates:
            updates["slug"] = self._unique_slug(
                updates["slug"] or updates.get("title", product.title),
                exclude_id=product.id,
            )

        for key, value in updates.items():
            setattr(product, key, value)
        product.updated_at = datetime.now(timezone.utc)
        self.repository.save(product)

        self._log.info("Product updated", product_id=product.id, fields=sorted(updates))
        return product

    async def delete_product(self, product_id: str) -> ProductDocument:
        """Delete a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = self.repository.delete(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        self._log.info("Product deleted", product_id=product_id)
        return product


# ============================================================================
# Service Factories
# ============================================================================


def get_region_service(request_id: str | None = None) -> RegionService:
    """Get region service instance."""
    return RegionService(request_id=request_id)


def get_product_service(request_id: str | None = None) -> ProductService:
    """Get product service instance."""
    return ProductService(request_id=request_id)
