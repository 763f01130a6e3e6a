from shopping_cart.routes.cart import cart_bp
from shopping_cart.routes.products import products_bp

__all__ = ["products_bp", "cart_bp"]
