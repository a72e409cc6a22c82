"""Cart line building for the product detail page.

Validates a shopper's selection against the product record and turns it
into cart lines, one per selected colour.
"""

from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any

import structlog

from storefront.cart.entities import CartLine
from storefront.catalog.pipeline import normalize
from storefront.catalog.values import to_int, to_number
from storefront.domain.exceptions import (
    ColorRequiredError,
    InsufficientStockError,
    InvalidQuantityError,
    OptionRequiredError,
    OutOfStockError,
)

logger = structlog.get_logger()


def _find_raw_option(record: Mapping[str, Any], option_id: str) -> Mapping[str, Any] | None:
    options = record.get("quantityOptions")
    if not isinstance(options, list):
        return None
    for option in options:
        if isinstance(option, Mapping) and option_id in (option.get("id"), option.get("code")):
            return option
    return None


def _uses_size_inventory(record: Mapping[str, Any]) -> bool:
    return bool(record.get("trackInventoryBySize")) and isinstance(record.get("sizeInventory"), list)


def _has_quantity_options(record: Mapping[str, Any]) -> bool:
    options = record.get("quantityOptions")
    return isinstance(options, list) and len(options) > 0


def selection_stock(record: Mapping[str, Any], option_id: str | None = None) -> int:
    """Stock that bounds an add-to-cart for a selection.

    The selected quantity option wins, then the size inventory entry,
    then the product's own stock. Colour inventory is not consulted.

    Args:
        record: Raw product record.
        option_id: Selected option id (or legacy size code).

    Returns:
        Units available.
    """
    if option_id and _has_quantity_options(record):
        option = _find_raw_option(record, option_id)
        if option is None:
            return 0
        return to_int(option.get("stock")) or to_int(option.get("qty"))

    if option_id and _uses_size_inventory(record):
        for entry in record["sizeInventory"]:
            if isinstance(entry, Mapping) and entry.get("code") == option_id:
                return to_int(entry.get("qty"))
        return 0

    return to_int(record.get("stock"))


def available_stock(
    record: Mapping[str, Any],
    option_id: str | None = None,
    colors: Sequence[str] = (),
) -> int:
    """Stock shown for a selection on the detail page.

    With colours selected the scarcest colour counts, otherwise
    ``selection_stock`` applies.
    """
    color_inventory = record.get("colorInventory")
    if colors and isinstance(color_inventory, list):
        counts = {
            entry.get("color"): to_int(entry.get("qty"))
            for entry in color_inventory
            if isinstance(entry, Mapping)
        }
        return min(counts.get(color, 0) for color in colors)
    return selection_stock(record, option_id)


def build_cart_lines(
    record: Mapping[str, Any],
    quantity: int,
    option_id: str | None = None,
    colors: Sequence[str] = (),
    api_base: str = "",
) -> list[CartLine]:
    """Validate a selection and build cart lines.

    Args:
        record: Raw product record.
        quantity: Units per line.
        option_id: Selected quantity option (or legacy size code).
        colors: Selected colours; one line is built per colour.
        api_base: Backend base URL used to resolve the image.

    Returns:
        Cart lines ready to add.

    Raises:
        InvalidQuantityError: If quantity is below 1.
        OptionRequiredError: If the product needs an option and none is chosen.
        ColorRequiredError: If the product lists colours and none is chosen.
        OutOfStockError: If the selection has no stock.
        InsufficientStockError: If quantity exceeds the stock.
    """
    card = normalize(record, api_base=api_base)

    if quantity < 1:
        raise InvalidQuantityError(quantity)

    has_options = _has_quantity_options(record)
    if (has_options or _uses_size_inventory(record)) and not option_id:
        raise OptionRequiredError(card.id)

    product_colors = record.get("colors")
    if isinstance(product_colors, list) and product_colors and not colors:
        raise ColorRequiredError(card.id)

    stock = selection_stock(record, option_id)
    if stock <= 0:
        raise OutOfStockError(card.id, option_id)
    if quantity > stock:
        raise InsufficientStockError(card.id, quantity, stock)

    unit_price = card.base_price
    if has_options and option_id:
        option = _find_raw_option(record, option_id) or {}
        unit_price = to_number(option.get("price")) or unit_price

    base_line = CartLine(
        product_id=card.id,
        title=card.name,
        unit_price=unit_price,
        image=card.image,
        quantity=quantity,
        option_id=option_id,
    )
    if not colors:
        return [base_line]

    logger.debug("Building colour lines", product_id=card.id, colors=list(colors))
    return [replace(base_line, color=color) for color in colors]
