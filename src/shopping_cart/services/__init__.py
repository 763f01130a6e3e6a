from .cart_service import CartService
from .product_service import ProductService

__all__ = ["CartService", "ProductService"]
