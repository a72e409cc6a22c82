"""Domain layer.

Error hierarchy shared by the catalog services, the cart and the API.
"""

from storefront.domain.exceptions import (
    CartError,
    ColorRequiredError,
    ConflictError,
    DomainError,
    DuplicateRegionError,
    InsufficientStockError,
    InvalidQuantityError,
    NotFoundError,
    OptionRequiredError,
    OutOfStockError,
    ProductNotFoundError,
    RegionNotFoundError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    # Lookup
    "NotFoundError",
    "RegionNotFoundError",
    "ProductNotFoundError",
    # Conflicts
    "ConflictError",
    "DuplicateRegionError",
    # Cart
    "CartError",
    "OptionRequiredError",
    "ColorRequiredError",
    "OutOfStockError",
    "InsufficientStockError",
    "InvalidQuantityError",
]
