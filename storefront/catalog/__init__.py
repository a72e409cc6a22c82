"""Product Catalog.

Provides the catalog view pipeline used by the browsing pages, quantity
option handling, and the region / product document services behind the
REST API.
"""

from storefront.catalog.documents import ProductDocument, RegionDocument
from storefront.catalog.pipeline import (
    FilterConfig,
    NormalizedCard,
    Page,
    SortMode,
    build_view,
    effective_price,
    filter_cards,
    normalize,
    order_newest,
    paginate,
    sort_cards,
)
from storefront.catalog.quantity import QuantityOption, derive_detail_options, display_options
from storefront.catalog.repository import ProductRepository, RegionRepository
from storefront.catalog.service import ProductService, RegionService
from storefront.catalog.text import normalize_category_key, resolve_image, slugify

__all__ = [
    # Pipeline
    "FilterConfig",
    "NormalizedCard",
    "Page",
    "SortMode",
    "build_view",
    "effective_price",
    "filter_cards",
    "normalize",
    "order_newest",
    "paginate",
    "sort_cards",
    # Quantity options
    "QuantityOption",
    "derive_detail_options",
    "display_options",
    # Text
    "normalize_category_key",
    "resolve_image",
    "slugify",
    # Documents
    "ProductDocument",
    "RegionDocument",
    # Repository
    "ProductRepository",
    "RegionRepository",
    # Service
    "ProductService",
    "RegionService",
]
