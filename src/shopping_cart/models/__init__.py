from .product import Product
from .cart import Cart, CartItem, CartTotals, validate_quantity

__all__ = [
    "Product",
    "Cart", "CartItem", "CartTotals",
    "validate_quantity",
]
