from .cart_repository import CartRepository
from .product_repository import ProductRepository

__all__ = ["CartRepository", "ProductRepository"]
