# Importing both tables here registers them with Base.metadata before any
# call to Base.metadata.create_all().

from shopping_cart.orm.cart import CartDocument
from shopping_cart.orm.product import ProductRecord

__all__ = ["CartDocument", "ProductRecord"]
