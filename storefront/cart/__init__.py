"""Shopping cart.

Cart lines, cart accumulation and selection validation.
"""

from storefront.cart.builder import available_stock, build_cart_lines, selection_stock
from storefront.cart.entities import Cart, CartLine

__all__ = [
    "Cart",
    "CartLine",
    "available_stock",
    "build_cart_lines",
    "selection_stock",
]
