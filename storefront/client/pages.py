"""Page controllers for the storefront browsing pages.

Each controller owns the records fetched for one page and hands them to
the catalog pipeline to build what the page renders:
- ShopPage: filterable, sortable, paginated catalog
- RegionPage: products of one region
- ProductDetailPage: one product with its quantity options and cart flow
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

import structlog

from storefront.cart.builder import available_stock, build_cart_lines, selection_stock
from storefront.cart.entities import Cart, CartLine
from storefront.catalog.pipeline import (
    ALL,
    FilterConfig,
    NormalizedCard,
    Page,
    SortMode,
    build_view,
    normalize_all,
    order_newest,
    paginate,
)
from storefront.catalog.quantity import QuantityOption, derive_detail_options
from storefront.client.api_client import APIResponse, StorefrontAPIClient
from storefront.domain.exceptions import InsufficientStockError
from storefront.infrastructure.config import Settings, settings

logger = structlog.get_logger()


# ============================================================================
# Page State
# ============================================================================


@dataclass(frozen=True)
class ShopState:
    """Filter, sort, search and page selection of the shop page.

    Every transition returns a new state. Changing a filter, the sort or
    the search text moves back to the first page.
    """

    category: str = ALL
    quantity_label: str = ALL
    price_range: tuple[float, float] = (settings.default_min_price, settings.default_max_price)
    sort: SortMode = SortMode.NONE
    page: int = 1
    search: str = ""

    @property
    def filters(self) -> FilterConfig:
        """Filter configuration for the pipeline."""
        return FilterConfig(
            category=self.category,
            quantity_label=self.quantity_label,
            price_range=self.price_range,
        )

    def with_category(self, category: str) -> "ShopState":
        return replace(self, category=category, page=1)

    def with_quantity_label(self, label: str) -> "ShopState":
        return replace(self, quantity_label=label, page=1)

    def with_price_range(self, low: float, high: float) -> "ShopState":
        return replace(self, price_range=(low, high), page=1)

    def with_sort(self, sort: SortMode | str) -> "ShopState":
        return replace(self, sort=SortMode.parse(sort), page=1)

    def with_search(self, search: str) -> "ShopState":
        return replace(self, search=search, page=1)

    def with_page(self, page: int) -> "ShopState":
        return replace(self, page=max(1, page))

    def reset_filters(self) -> "ShopState":
        """Restore default filters and sort, keeping the search text."""
        return ShopState(search=self.search)


def page_size_for_viewport(width: float, config: Settings = settings) -> int:
    """Page size for a viewport width in logical pixels.

    Args:
        width: Viewport width.
        config: Settings holding the breakpoint and page sizes.

    Returns:
        Mobile page size below the breakpoint, desktop page size otherwise.
    """
    if width < config.mobile_breakpoint:
        return config.mobile_page_size
    return config.desktop_page_size


# ============================================================================
# Fetch Supersession
# ============================================================================


class FetchGeneration:
    """Generation counter for in-flight fetches.

    Each fetch takes a token from ``begin()``; once a newer fetch begins,
    older tokens are no longer current and their results are dropped.
    """

    def __init__(self) -> None:
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def begin(self) -> int:
        """Start a fetch and return its token."""
        self._current += 1
        return self._current

    def is_current(self, token: int) -> bool:
        """Whether a fetch token belongs to the latest fetch."""
        return token == self._current


class NoticeVariant(str, Enum):
    """Visual weight of a user notice."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notice:
    """Message shown to the shopper."""

    title: str
    description: str
    variant: NoticeVariant = NoticeVariant.DEFAULT


def _records(response: APIResponse) -> list[dict[str, Any]] | None:
    if not response.success:
        return None
    data = response.data
    if isinstance(data, list):
        return [record for record in data if isinstance(record, dict)]
    return []


# ============================================================================
# Shop Page
# ============================================================================


class ShopPage:
    """Catalog page with filters, sorting and pagination.

    Args:
        client: API client used for fetching.
        listing_mode: "all" keeps the backend order, "newest" reorders by
            creation time.
        config: Settings for limits and image resolution.
    """

    def __init__(
        self,
        client: StorefrontAPIClient,
        listing_mode: str = "all",
        config: Settings = settings,
        https_page: bool = False,
    ) -> None:
        self.client = client
        self.listing_mode = listing_mode
        self.config = config
        self.https_page = https_page
        self.records: list[dict[str, Any]] = []
        self.notices: list[Notice] = []
        self.loading = False
        self.generation = FetchGeneration()
        self._last_state = ShopState()

    @property
    def quantity_labels(self) -> list[str]:
        """Labels offered by the quantity filter, "All" first."""
        return list(self.config.quantity_labels)

    async def refresh(self, state: ShopState) -> bool:
        """Fetch the product records for a state.

        The filters are sent to the backend as well, but the pipeline
        re-applies them to whatever comes back.

        Args:
            state: Current page state.

        Returns:
            True when the result was applied, False when a newer fetch
            superseded it.
        """
        token = self.generation.begin()
        self._last_state = state
        self.loading = True
        low, high = state.price_range

        response = await self.client.list_products(
            q=state.search.strip() or None,
            category=None if state.category == ALL else state.category,
            quantities=None if state.quantity_label == ALL else state.quantity_label,
            min_price=low,
            max_price=high,
            active="all",
            limit=self.config.product_fetch_limit,
        )

        if not self.generation.is_current(token):
            logger.debug("Discarding stale product fetch", token=token, current=self.generation.current)
            return False

        records = _records(response)
        if records is None:
            message = response.error.message if response.error else "Unknown error"
            logger.warning("Product fetch failed", error=message)
            self.notices.append(
                Notice(
                    title="Failed to load products",
                    description=message,
                    variant=NoticeVariant.DESTRUCTIVE,
                )
            )
            records = []

        if self.listing_mode == "newest":
            records = order_newest(records)

        self.records = records
        self.loading = False
        return True

    async def notify_product_created(self) -> bool:
        """Re-fetch after a product was created elsewhere."""
        return await self.refresh(self._last_state)

    def view(self, state: ShopState, viewport_width: float) -> Page[NormalizedCard]:
        """Build the page of cards to render.

        Args:
            state: Current page state.
            viewport_width: Viewport width in logical pixels.

        Returns:
            Page of cards with pagination metadata.
        """
        return build_view(
            self.records,
            state.filters,
            state.sort,
            state.page,
            page_size_for_viewport(viewport_width, self.config),
            api_base=self.config.api_base_url,
            https_page=self.https_page,
        )


# ============================================================================
# Region Page
# ============================================================================


class RegionPage:
    """Products of a single region, paginated without filters."""

    def __init__(
        self,
        client: StorefrontAPIClient,
        slug: str,
        config: Settings = settings,
    ) -> None:
        self.client = client
        self.slug = slug
        self.config = config
        self.region: dict[str, Any] | None = None
        self.records: list[dict[str, Any]] = []
        self.not_found = False
        self.notices: list[Notice] = []

    async def load(self) -> None:
        """Resolve the region by slug and fetch its products."""
        response = await self.client.list_regions()
        regions = _records(response) or []
        self.region = next((r for r in regions if r.get("slug") == self.slug), None)

        if self.region is None:
            self.not_found = True
            self.records = []
            logger.info("Region not found", slug=self.slug)
            return

        self.not_found = False
        products = await self.client.list_products(
            region=self.slug,
            limit=self.config.product_fetch_limit,
        )
        records = _records(products)
        if records is None:
            message = products.error.message if products.error else "Unknown error"
            self.notices.append(
                Notice(
                    title="Failed to load products",
                    description=message,
                    variant=NoticeVariant.DESTRUCTIVE,
                )
            )
            records = []
        self.records = records

    def view(self, page_number: int = 1) -> Page[NormalizedCard]:
        cards = normalize_all(self.records, api_base=self.config.api_base_url)
        return paginate(cards, self.config.region_page_size, page_number)


# ============================================================================
# Product Detail Page
# ============================================================================


@dataclass
class ProductDetailPage:
    """A single product with option selection and add-to-cart."""

    client: StorefrontAPIClient
    slug: str
    cart: Cart = field(default_factory=Cart)
    config: Settings = field(default_factory=lambda: settings)
    record: dict[str, Any] | None = None
    not_found: bool = False

    async def load(self) -> None:
        """Fetch the product record by slug."""
        response = await self.client.get_product(self.slug)
        if response.success and isinstance(response.data, dict):
            self.record = response.data
            self.not_found = False
        else:
            self.record = None
            self.not_found = True
            logger.info("Product not found", slug=self.slug)

    def _require_record(self) -> dict[str, Any]:
        if self.record is None:
            raise RuntimeError("Product not loaded")
        return self.record

    @property
    def options(self) -> list[QuantityOption]:
        """Selectable quantity options (including legacy size inventory)."""
        if self.record is None:
            return []
        return derive_detail_options(self.record)

    def stock_for(self, option_id: str | None = None, colors: tuple[str, ...] = ()) -> int:
        """Units available for a selection."""
        return available_stock(self._require_record(), option_id, colors)

    def add_to_cart(
        self,
        quantity: int = 1,
        option_id: str | None = None,
        colors: tuple[str, ...] = (),
    ) -> list[CartLine]:
        """Validate the selection and add it to the cart.

        Units already in the cart for the same option count against its
        stock.

        Raises:
            CartError: If the selection cannot be added.
        """
        record = self._require_record()
        lines = build_cart_lines(
            record,
            quantity,
            option_id=option_id,
            colors=colors,
            api_base=self.config.api_base_url,
        )
        product_id = lines[0].product_id
        requested = quantity + self.cart.quantity_of(product_id, option_id)
        stock = selection_stock(record, option_id)
        if requested > stock:
            raise InsufficientStockError(product_id, requested, stock)
        return [self.cart.add(line) for line in lines]
