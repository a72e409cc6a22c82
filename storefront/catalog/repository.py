"""Document repositories for regions and products.

In-process document store. Repositories are module-level singletons so
every request of the running app sees the same documents.
"""

from storefront.catalog.documents import ProductDocument, RegionDocument


class RegionRepository:
    """In-memory repository for regions."""

    def __init__(self) -> None:
        self._regions: dict[str, RegionDocument] = {}

    def __len__(self) -> int:
        return len(self._regions)

    def save(self, region: RegionDocument) -> RegionDocument:
        """Insert or replace a region."""
        self._regions[region.id] = region
        return region

    def get(self, region_id: str) -> RegionDocument | None:
        """Get region by ID."""
        return self._regions.get(region_id)

    def get_by_slug(self, slug: str) -> RegionDocument | None:
        """Get region by slug."""
        for region in self._regions.values():
            if region.slug == slug:
                return region
        return None

    def find_by_name(self, name: str, exclude_id: str | None = None) -> RegionDocument | None:
        """Find a region whose name matches regardless of case.

        Args:
            name: Name to look for.
            exclude_id: Region to ignore (the one being updated).

        Returns:
            Matching region, if any.
        """
        wanted = name.casefold()
        for region in self._regions.values():
            if region.id != exclude_id and region.name.casefold() == wanted:
                return region
        return None

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        """Check whether another region uses the slug."""
        return any(
            region.slug == slug and region.id != exclude_id
            for region in self._regions.values()
        )

    def list_all(self, active_only: bool = True) -> list[RegionDocument]:
        """List regions sorted by name."""
        regions = list(self._regions.values())
        if active_only:
            regions = [r for r in regions if r.active]
        regions.sort(key=lambda r: r.name)
        return regions

    def delete(self, region_id: str) -> RegionDocument | None:
        """Delete a region, returning the removed document."""
        return self._regions.pop(region_id, None)


class ProductRepository:
    """In-memory repository for products."""

    def __init__(self) -> None:
        self._products: dict[str, ProductDocument] = {}

    def __len__(self) -> int:
        return len(self._products)

    def save(self, product: ProductDocument) -> ProductDocument:
        """Insert or replace a product."""
        self._products[product.id] = product
        return product

    def get(self, product_id: str) -> ProductDocument | None:
        """Get product by ID."""
        return self._products.get(product_id)

    def get_by_slug(self, slug: str) -> ProductDocument | None:
        """Get product by slug."""
        for product in self._products.values():
            if product.slug == slug:
                return product
        return None

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        """Check whether another product uses the slug."""
        return any(
            product.slug == slug and product.id != exclude_id
            for product in self._products.values()
        )

    def find_all(
        self,
        region: str | None = None,
        include_inactive: bool = False,
        search: str | None = None,
        limit: int = 200,
    ) -> list[ProductDocument]:
        """Find products, newest first.

        Args:
            region: Region slug to match exactly.
            include_inactive: Whether to include inactive products.
            search: Case-insensitive text matched against title,
                description and category.
            limit: Maximum results.

        Returns:
            Matching products.
        """
        # Latest insertion first among equal timestamps
        products = list(reversed(self._products.values()))

        if region is not None:
            products = [p for p in products if p.region == region]

        if not include_inactive:
            products = [p for p in products if p.active]

        if search:
            needle = search.casefold()
            products = [
                p
                for p in products
                if needle in p.title.casefold()
                or needle in (p.description or "").casefold()
                or needle in p.category.casefold()
            ]

        products.sort(key=lambda p: p.created_at, reverse=True)
        return products[:limit]

    def delete(self, product_id: str) -> ProductDocument | None:
        """Delete a product, returning the removed document."""
        return self._products.pop(product_id, None)


# Global repository instances
_region_repo: RegionRepository | None = None
_product_repo: ProductRepository | None = None


def get_region_repository() -> RegionRepository:
    """Get region repository singleton."""
    global _region_repo
    if _region_repo is None:
        _region_repo = RegionRepository()
    return _region_repo


def reset_region_repository() -> None:
    """Reset region repository (for testing)."""
    global _region_repo
    _region_repo = RegionRepository()


def get_product_repository() -> ProductRepository:
    """Get product repository singleton."""
    global _product_repo
    if _product_repo is None:
        _product_repo = ProductRepository()
    return _product_repo


def reset_product_repository() -> None:
    """Reset product repository (for testing)."""
    global _product_repo
    _product_repo = ProductRepository()
