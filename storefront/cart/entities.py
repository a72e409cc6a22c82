"""Cart entities.

A cart holds lines keyed by product, selected option and colour. Adding
a line that is already present increases its quantity.
"""

from dataclasses import dataclass, field, replace

from storefront.domain.exceptions import InvalidQuantityError

LineKey = tuple[str, str | None, str | None]


@dataclass(frozen=True)
class CartLine:
    """A product selection in the cart.

    Attributes:
        product_id: Product identifier.
        title: Product title at the time of adding.
        unit_price: Price per unit (option price when an option is chosen).
        image: Resolved image URL.
        quantity: Units.
        option_id: Selected quantity option (or legacy size code).
        color: Selected colour.
    """

    product_id: str
    title: str
    unit_price: float
    image: str
    quantity: int = 1
    option_id: str | None = None
    color: str | None = None

    @property
    def key(self) -> LineKey:
        """Identity of the line within a cart."""
        return (self.product_id, self.option_id, self.color)

    @property
    def line_total(self) -> float:
        """Calculate line total."""
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """Shopping cart."""

    lines: dict[LineKey, CartLine] = field(default_factory=dict)

    def add(self, line: CartLine, quantity: int | None = None) -> CartLine:
        """Add a line, merging with an identical one.

        Stock is not checked here; callers bound the merged quantity.

        Args:
            line: Line to add.
            quantity: Units to add. Defaults to the line's own quantity.

        Returns:
            The resulting cart line.

        Raises:
            InvalidQuantityError: If quantity is not positive.
        """
        units = line.quantity if quantity is None else quantity
        if units < 1:
            raise InvalidQuantityError(units)

        existing = self.lines.get(line.key)
        total = units + (existing.quantity if existing else 0)
        merged = replace(line, quantity=total)
        self.lines[line.key] = merged
        return merged

    def quantity_of(self, product_id: str, option_id: str | None = None) -> int:
        """Units of a product option in the cart, across colours."""
        return sum(
            line.quantity
            for line in self.lines.values()
            if line.product_id == product_id and line.option_id == option_id
        )

    def remove(self, key: LineKey) -> CartLine | None:
        """Remove a line, returning it if present."""
        return self.lines.pop(key, None)

    def clear(self) -> None:
        """Remove every line."""
        self.lines.clear()

    @property
    def item_count(self) -> int:
        """Total number of units."""
        return sum(line.quantity for line in self.lines.values())

    @property
    def subtotal(self) -> float:
        """Sum of line totals."""
        return sum(line.line_total for line in self.lines.values())

    @property
    def is_empty(self) -> bool:
        """Check if the cart has no lines."""
        return not self.lines
