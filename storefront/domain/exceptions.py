"""Domain exceptions.

All domain-level errors that represent business rule violations.
These exceptions are raised by the catalog services and the cart when
invariants are violated or invalid operations are attempted.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Raised when a payload fails a business validation rule."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


# ============================================================================
# Lookup Errors
# ============================================================================


class NotFoundError(DomainError):
    """Base class for missing documents."""

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str) -> None:
        super().__init__(
            "Not found",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_id = entity_id


class RegionNotFoundError(NotFoundError):
    """Raised when a region does not exist."""

    error_code = "REGION_NOT_FOUND"

    def __init__(self, region_id: str) -> None:
        super().__init__("Region", region_id)


class ProductNotFoundError(NotFoundError):
    """Raised when a product does not exist."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        super().__init__("Product", product_id)


# ============================================================================
# Conflict Errors
# ============================================================================


class ConflictError(DomainError):
    """Raised when a write would violate a uniqueness rule."""

    error_code = "CONFLICT"


class DuplicateRegionError(ConflictError):
    """Raised when a region name or slug is already taken."""

    error_code = "DUPLICATE_REGION"

    def __init__(self, name: str, by_slug: bool = False) -> None:
        message = (
            "Region with this name or slug already exists"
            if by_slug
            else "Region with this name already exists"
        )
        super().__init__(message, details={"name": name})


# ============================================================================
# Cart Errors
# ============================================================================


class CartError(DomainError):
    """Base class for cart-related errors."""

    error_code = "CART_ERROR"


class OptionRequiredError(CartError):
    """Raised when a product needs a quantity option selection."""

    error_code = "OPTION_REQUIRED"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            "Please choose a quantity option before adding to cart.",
            details={"product_id": product_id},
        )


class ColorRequiredError(CartError):
    """Raised when a product with colours has none selected."""

    error_code = "COLOR_REQUIRED"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            "Please choose at least one color before adding to cart.",
            details={"product_id": product_id},
        )


class OutOfStockError(CartError):
    """Raised when the selected product or option has no stock."""

    error_code = "OUT_OF_STOCK"

    def __init__(self, product_id: str, option_id: str | None = None) -> None:
        message = f"Option {option_id} is out of stock" if option_id else "Out of stock"
        super().__init__(
            message,
            details={"product_id": product_id, "option_id": option_id},
        )


class InsufficientStockError(CartError):
    """Raised when the requested quantity exceeds available stock."""

    error_code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Only {available} available",
            details={
                "product_id": product_id,
                "requested": requested,
                "available": available,
            },
        )
        self.available = available


class InvalidQuantityError(CartError):
    """Raised when quantity is invalid (zero or negative)."""

    error_code = "INVALID_QUANTITY"

    def __init__(self, quantity: int, reason: str = "Quantity must be positive") -> None:
        super().__init__(
            f"Invalid quantity {quantity}: {reason}",
            details={"quantity": quantity, "reason": reason},
        )
