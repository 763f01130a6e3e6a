import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

from shopping_cart.repositories.product_repository import ProductRepository
from shopping_cart.models.product import Product
from shopping_cart.core.exceptions import NotFoundError
import logging

logger = logging.getLogger(__name__)


class ProductService:
    """
    Product catalog service

    Plain CRUD over the product table. Input has already been validated by
    the request schema; duplicate ids surface from the repository as
    ConflictError.
    """

    def __init__(self, product_repository: ProductRepository):
        self.product_repo = product_repository

    def create_product(self, data: Dict[str, Any]) -> Product:
        product = Product(
            id=data.get("id") or str(uuid.uuid4()),
            category=data["category"],
            name=data["name"],
            description=data.get("description"),
            price=Decimal(data["price"]),
            stock_quantity=data.get("stock_quantity", 0),
        )
        logger.info(f"Creating product {product.id} in category {product.category}")
        return self.product_repo.create(product)

    def get_all_products(self) -> List[Product]:
        return self.product_repo.find_all()

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        return self.product_repo.find_by_id(product_id)

    def get_products_by_category(self, category: str) -> List[Product]:
        return self.product_repo.find_by_category(category)

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Product:
        """Replace a product's fields. The id in the path always wins."""
        logger.info(f"Updating product {product_id}")
        product = Product(
            id=product_id,
            category=data["category"],
            name=data["name"],
            description=data.get("description"),
            price=Decimal(data["price"]),
            stock_quantity=data.get("stock_quantity", 0),
        )
        updated = self.product_repo.update(product)
        if updated is None:
            raise NotFoundError("Product", product_id)
        return updated

    def delete_product(self, product_id: str) -> None:
        logger.info(f"Deleting product {product_id}")
        if not self.product_repo.delete(product_id):
            raise NotFoundError("Product", product_id)
