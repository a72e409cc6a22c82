"""Catalog view pipeline.

Turns the raw product list fetched from the product service into the
page of cards a browsing page renders:

    raw records -> normalize -> filter -> sort -> paginate -> page

Every stage is a pure function over in-memory data. The pipeline never
raises on malformed records: missing or non-numeric fields fall back to
their zero values, so any input list yields a deterministic page.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

import structlog

from storefront.catalog.quantity import QuantityOption, display_options, parse_options
from storefront.catalog.text import normalize_category_key, resolve_image
from storefront.catalog.values import round_half_up, to_number

logger = structlog.get_logger()

T = TypeVar("T")

ALL = "All"
_ALL_KEY = normalize_category_key(ALL)


# ============================================================================
# Normalization
# ============================================================================


class DiscountKind(str, Enum):
    """Supported discount kinds."""

    PERCENTAGE = "percentage"
    FLAT = "flat"


@dataclass(frozen=True)
class NormalizedCard:
    """Render-ready projection of a product record.

    Attributes:
        id: Product identifier.
        name: Display name.
        image: Resolved primary image URL.
        price: Effective price after discount.
        base_price: Price before discount. Filtering and sorting use this.
        original_price: Base price when a discount applies.
        discounted_price: Effective price when a discount applies.
        discount_percentage: Percentage value of a percentage discount.
        discount_amount: Amount of a flat discount.
        category: Category label as stored.
        slug: URL slug.
        images: All image references as stored.
        rating: Average review rating, one decimal.
        is_best_seller: Best-seller badge flag.
        quantity_options: Options in stored order.
        created_at: Creation timestamp as stored.
    """

    id: str
    name: str
    image: str
    price: float
    base_price: float
    original_price: float | None = None
    discounted_price: float | None = None
    discount_percentage: float | None = None
    discount_amount: float | None = None
    category: str = ""
    slug: str = ""
    images: tuple[str, ...] = ()
    rating: float = 0.0
    is_best_seller: bool = False
    quantity_options: tuple[QuantityOption, ...] = field(default_factory=tuple)
    created_at: str | None = None

    @property
    def display_options(self) -> list[QuantityOption]:
        """Active options in display order."""
        return display_options(self.quantity_options)

    @property
    def has_discount(self) -> bool:
        """Check if a discount applies to the card."""
        return self.original_price is not None


def _discount_parts(discount: Any) -> tuple[str | None, float]:
    if not isinstance(discount, Mapping):
        return None, 0.0
    kind = discount.get("type", discount.get("kind"))
    return (str(kind) if kind is not None else None), to_number(discount.get("value"))


def effective_price(base_price: float, discount: Any) -> float:
    """Apply a discount to a base price.

    Percentage discounts take ``value`` percent off, flat discounts
    subtract ``value``. The result always lies within ``[0, base_price]``.
    A missing discount, a zero value or an unknown kind leaves the price
    unchanged.

    Args:
        base_price: Non-negative base price.
        discount: Discount mapping ``{"type": ..., "value": ...}``.

    Returns:
        Effective price.
    """
    base = max(0.0, to_number(base_price))
    kind, value = _discount_parts(discount)
    if not value:
        return base

    if kind == DiscountKind.PERCENTAGE.value:
        percent = min(100.0, max(0.0, value))
        return max(0.0, base - base * percent / 100)
    if kind == DiscountKind.FLAT.value:
        return max(0.0, base - max(0.0, value))
    return base


def average_rating(reviews: Any) -> float:
    """Average review rating rounded half-up to one decimal.

    Args:
        reviews: List of review mappings with a ``rating``.

    Returns:
        Average rating, 0.0 when there are no reviews.
    """
    if not isinstance(reviews, list) or not reviews:
        return 0.0
    total = sum(
        to_number(review.get("rating")) if isinstance(review, Mapping) else 0.0
        for review in reviews
    )
    return round_half_up(total / len(reviews), 1)


def _primary_image(record: Mapping[str, Any]) -> str:
    images = record.get("images")
    first_image = images[0] if isinstance(images, list) and images else ""
    return record.get("image_url") or first_image or record.get("image") or ""


def normalize(
    record: Any,
    api_base: str = "",
    https_page: bool = False,
) -> NormalizedCard:
    """Project a raw product record into a card.

    Args:
        record: Raw product record from the product service.
        api_base: Backend base URL used to resolve uploaded images.
        https_page: Whether the consuming page is served over HTTPS.

    Returns:
        Normalized card.
    """
    if not isinstance(record, Mapping):
        record = {}

    base = max(0.0, to_number(record.get("price")))
    kind, value = _discount_parts(record.get("discount"))
    price = effective_price(base, record.get("discount"))
    discounted = bool(value)

    images = record.get("images")
    created_at = record.get("createdAt")

    return NormalizedCard(
        id=str(record.get("_id") or record.get("id") or ""),
        name=str(record.get("title") or record.get("name") or ""),
        image=resolve_image(_primary_image(record), api_base=api_base, https_page=https_page),
        price=price,
        base_price=base,
        original_price=base if discounted else None,
        discounted_price=price if discounted else None,
        discount_percentage=value if kind == DiscountKind.PERCENTAGE.value else None,
        discount_amount=value if kind == DiscountKind.FLAT.value else None,
        category=str(record.get("category") or ""),
        slug=str(record.get("slug") or ""),
        images=tuple(str(i) for i in images) if isinstance(images, list) else (),
        rating=average_rating(record.get("reviews")),
        is_best_seller=bool(record.get("isBestSeller")),
        quantity_options=tuple(parse_options(record.get("quantityOptions"))),
        created_at=str(created_at) if created_at else None,
    )


def normalize_all(
    records: Iterable[Any],
    api_base: str = "",
    https_page: bool = False,
) -> list[NormalizedCard]:
    """Normalize every record, preserving order."""
    return [normalize(record, api_base=api_base, https_page=https_page) for record in records]


# ============================================================================
# Filtering
# ============================================================================


@dataclass(frozen=True)
class FilterConfig:
    """Shop filter selection.

    Attributes:
        category: Category label, or "All" (any case) for no filtering.
        quantity_label: Quantity option label, or "All".
        price_range: Inclusive ``(min, max)`` bounds on base price.
    """

    category: str = ALL
    quantity_label: str = ALL
    price_range: tuple[float, float] = (0, 5000)


def matches_category(card: NormalizedCard, category: str) -> bool:
    """Check the category predicate."""
    wanted = normalize_category_key(category)
    if wanted == _ALL_KEY:
        return True
    return normalize_category_key(card.category) == wanted


def matches_quantity_label(card: NormalizedCard, label: str) -> bool:
    """Check the quantity-label predicate (exact, case-sensitive)."""
    if label == ALL:
        return True
    return any(option.display_label == label for option in card.quantity_options)


def matches_price_range(card: NormalizedCard, price_range: tuple[float, float]) -> bool:
    """Check the base-price range predicate (inclusive)."""
    low, high = price_range
    return low <= card.base_price <= high


def filter_cards(cards: Sequence[NormalizedCard], config: FilterConfig) -> list[NormalizedCard]:
    """Keep the cards matching every filter.

    Category, quantity label and price range are applied in that order.

    Args:
        cards: Normalized cards.
        config: Filter selection.

    Returns:
        Matching cards in input order.
    """
    result = list(cards)
    logger.debug("Filtering catalog", count=len(result))

    if normalize_category_key(config.category) != _ALL_KEY:
        result = [card for card in result if matches_category(card, config.category)]
        logger.debug("After category filter", category=config.category, count=len(result))

    if config.quantity_label != ALL:
        result = [card for card in result if matches_quantity_label(card, config.quantity_label)]
        logger.debug("After quantity filter", quantity_label=config.quantity_label, count=len(result))

    result = [card for card in result if matches_price_range(card, config.price_range)]
    logger.debug("After price filter", price_range=list(config.price_range), count=len(result))

    return result


# ============================================================================
# Sorting
# ============================================================================


class SortMode(str, Enum):
    """Price sort modes."""

    NONE = "none"
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def parse(cls, value: Any) -> "SortMode":
        """Parse a sort mode, accepting the shop's select values.

        Unknown values mean no sorting.
        """
        if isinstance(value, cls):
            return value
        aliases = {
            "low-to-high": cls.ASCENDING,
            "high-to-low": cls.DESCENDING,
            "asc": cls.ASCENDING,
            "desc": cls.DESCENDING,
        }
        text = str(value or "").strip().lower()
        if text in aliases:
            return aliases[text]
        try:
            return cls(text)
        except ValueError:
            return cls.NONE


def sort_cards(cards: Sequence[NormalizedCard], mode: SortMode | str) -> list[NormalizedCard]:
    """Sort cards by base price.

    The sort is stable in both directions: cards with equal prices keep
    their relative input order.

    Args:
        cards: Cards to sort.
        mode: Sort mode.

    Returns:
        New list of cards.
    """
    mode = SortMode.parse(mode)
    if mode is SortMode.ASCENDING:
        return sorted(cards, key=lambda card: card.base_price)
    if mode is SortMode.DESCENDING:
        return sorted(cards, key=lambda card: card.base_price, reverse=True)
    return list(cards)


def _created_timestamp(record: Any) -> float | None:
    if not isinstance(record, Mapping):
        return None
    raw = record.get("createdAt")
    if isinstance(raw, datetime):
        moment = raw
    else:
        try:
            moment = datetime.fromisoformat(str(raw).strip())
        except ValueError:
            return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


def order_newest(records: Sequence[Any]) -> list[Any]:
    """Order raw records newest first for the "New Arrivals" listing.

    Records without a parseable ``createdAt`` go last, keeping their order.

    Args:
        records: Raw product records.

    Returns:
        New list of records.
    """

    def key(record: Any) -> tuple[int, float]:
        timestamp = _created_timestamp(record)
        if timestamp is None:
            return (1, 0.0)
        return (0, -timestamp)

    return sorted(records, key=key)


# ============================================================================
# Pagination
# ============================================================================


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results.

    Attributes:
        items: Items on the page.
        page: Page number (1-indexed).
        page_size: Items per page.
        total: Number of items across all pages.
        total_pages: Number of pages, at least 1.
    """

    items: list[T]
    page: int
    page_size: int
    total: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1

    @property
    def is_empty(self) -> bool:
        """Check if the page has no items."""
        return not self.items


def paginate(items: Sequence[T], page_size: int, page_number: int) -> Page[T]:
    """Slice one page out of a list.

    Args:
        items: Full list.
        page_size: Items per page.
        page_number: 1-indexed page number; values below 1 mean page 1.

    Returns:
        The requested page. Pages past the end are empty.
    """
    page_size = max(1, int(page_size))
    page_number = max(1, int(page_number))
    total = len(items)
    total_pages = max(1, math.ceil(total / page_size))
    start = (page_number - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page=page_number,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
    )


# ============================================================================
# Full pipeline
# ============================================================================


def build_view(
    records: Iterable[Any],
    filters: FilterConfig,
    sort_mode: SortMode | str,
    page_number: int,
    page_size: int,
    api_base: str = "",
    https_page: bool = False,
) -> Page[NormalizedCard]:
    """Run the whole pipeline.

    Args:
        records: Raw product records as fetched.
        filters: Filter selection.
        sort_mode: Price sort mode.
        page_number: Page to render.
        page_size: Items per page for the current viewport.
        api_base: Backend base URL used to resolve uploaded images.
        https_page: Whether the consuming page is served over HTTPS.

    Returns:
        Page of cards with pagination metadata over the filtered list.
    """
    cards = normalize_all(records, api_base=api_base, https_page=https_page)
    matching = sort_cards(filter_cards(cards, filters), sort_mode)
    return paginate(matching, page_size, page_number)
