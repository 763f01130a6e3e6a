from .cart_schemas import (
    AddItemQuerySchema, UpdateItemQuerySchema, CartItemResponse, CartResponse
)
from .product_schemas import ProductSchema, ProductResponse

__all__ = [
    "AddItemQuerySchema", "UpdateItemQuerySchema", "CartItemResponse", "CartResponse",
    "ProductSchema", "ProductResponse",
]
