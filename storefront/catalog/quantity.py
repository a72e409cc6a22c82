"""Quantity options.

A quantity option is a purchasable pack of a product (e.g. "1L (2 X 500ml)")
with its own price and stock. This module parses raw options, orders them
for display and derives options for the product detail page, including
products that still carry the legacy size inventory.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from storefront.catalog.values import round_half_up, to_int, to_number

DEFAULT_UNIT = "g"
UNLIMITED_STOCK = 999

_LEADING_INT = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class QuantityOption:
    """A purchasable variant of a product.

    Attributes:
        id: Option identifier (unique within the product).
        quantity: Amount in ``unit`` for the whole pack.
        unit: Unit of measure ("gm", "ml", "l", "pcs").
        pack_size: Number of units in the pack.
        display_label: Label shown to shoppers, also used by the filter.
        price: Price of the option.
        original_price: Price before markdown, if any.
        stock: Units available.
        is_active: Whether the option is offered.
        sort_order: Display position.
    """

    id: str
    quantity: float = 0
    unit: str = ""
    pack_size: int = 1
    display_label: str = ""
    price: float = 0
    original_price: float | None = None
    stock: int = 0
    is_active: bool = False
    sort_order: float = 0

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "QuantityOption":
        """Parse an option from its wire representation.

        Missing or malformed fields take their zero values. Only a literal
        ``true`` marks an option active.

        Args:
            raw: Option mapping with camelCase keys.

        Returns:
            Parsed option.
        """
        original = raw.get("originalPrice")
        return cls(
            id=str(raw.get("id") or ""),
            quantity=to_number(raw.get("quantity")),
            unit=str(raw.get("unit") or ""),
            pack_size=to_int(raw.get("packSize"), default=1),
            display_label=str(raw.get("displayLabel") or ""),
            price=to_number(raw.get("price")),
            original_price=to_number(original) if original is not None else None,
            stock=to_int(raw.get("stock")),
            is_active=raw.get("isActive") is True,
            sort_order=to_number(raw.get("sortOrder")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        data: dict[str, Any] = {
            "id": self.id,
            "quantity": self.quantity,
            "unit": self.unit,
            "packSize": self.pack_size,
            "displayLabel": self.display_label,
            "price": self.price,
            "stock": self.stock,
            "isActive": self.is_active,
            "sortOrder": self.sort_order,
        }
        if self.original_price is not None:
            data["originalPrice"] = self.original_price
        return data

    @property
    def in_stock(self) -> bool:
        """Check if the option can be purchased."""
        return self.stock > 0

    @property
    def savings_percent(self) -> int:
        """Percent saved against the original price."""
        return calculate_savings(self.original_price, self.price)


def parse_options(raw_options: Any) -> list[QuantityOption]:
    """Parse a raw option list, skipping entries that are not mappings.

    Args:
        raw_options: Value of a record's ``quantityOptions`` field.

    Returns:
        Options in their stored order.
    """
    if not isinstance(raw_options, list):
        return []
    return [QuantityOption.from_raw(item) for item in raw_options if isinstance(item, Mapping)]


def display_options(options: Iterable[QuantityOption]) -> list[QuantityOption]:
    """Order options for display.

    Keeps active options only, sorted by sort order and then quantity.

    Args:
        options: Options in any order.

    Returns:
        Display-ready options.
    """
    active = [option for option in options if option.is_active]
    return sorted(active, key=lambda option: (option.sort_order, option.quantity))


def calculate_savings(original_price: float | None, current_price: float) -> int:
    """Compute the whole percent saved.

    Args:
        original_price: Price before markdown.
        current_price: Selling price.

    Returns:
        Percent saved, or 0 when there is no markdown.
    """
    if not original_price or original_price <= current_price:
        return 0
    return int(round_half_up((original_price - current_price) / original_price * 100))


def find_option(options: Iterable[QuantityOption], option_id: str | None) -> QuantityOption | None:
    """Find an option by id."""
    if not option_id:
        return None
    for option in options:
        if option.id == option_id:
            return option
    return None


def _first(*values: Any) -> Any:
    # First truthy value, else the last one
    for value in values:
        if value:
            return value
    return values[-1]


def derive_detail_options(record: Mapping[str, Any]) -> list[QuantityOption]:
    """Derive the options offered on the product detail page.

    Uses ``quantityOptions`` when the record has a list there, otherwise the
    legacy ``sizeInventory`` entries (``code``/``label``/``qty``). Gaps are
    filled from the product: the product price when an option has none,
    a label built from quantity and unit, and unlimited stock when no
    count is recorded. Options are active exactly when they have stock and
    keep their stored order.

    Args:
        record: Raw product record.

    Returns:
        Options in stored order.
    """
    source = record.get("quantityOptions")
    if not isinstance(source, list):
        source = record.get("sizeInventory")
    if not isinstance(source, list):
        return []

    product_price = to_number(record.get("price"))
    product_original = to_number(record.get("originalPrice"))

    options = []
    for index, item in enumerate(source):
        if not isinstance(item, Mapping):
            continue
        code = item.get("code")
        quantity = _first(to_number(item.get("quantity")), _leading_int(code), 1)
        unit = _first(item.get("unit"), DEFAULT_UNIT)
        label = _first(
            item.get("displayLabel"),
            item.get("label"),
            code,
            f"{_format_amount(to_number(item.get('quantity')) or 1)}{unit}",
        )

        if item.get("stock") is None and item.get("qty") is None:
            stock = UNLIMITED_STOCK
        else:
            stock = to_int(item.get("stock")) or to_int(item.get("qty"))

        options.append(
            QuantityOption(
                id=str(_first(item.get("id"), code, f"option-{index}")),
                quantity=quantity,
                unit=str(unit),
                pack_size=_first(to_int(item.get("packSize")), 1),
                display_label=str(label),
                price=_first(to_number(item.get("price")), product_price, 0),
                original_price=_first(to_number(item.get("originalPrice")), product_original) or None,
                stock=stock,
                is_active=stock > 0,
                sort_order=index,
            )
        )
    return options


def _leading_int(value: Any) -> int:
    # Leading integer: "500ml" -> 500, "S" -> 0
    match = _LEADING_INT.match(str(value or "").strip())
    return int(match.group()) if match else 0


def _format_amount(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
