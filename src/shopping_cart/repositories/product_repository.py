from typing import List, Optional

from sqlalchemy import select

from shopping_cart.repositories.base import BaseRepository
from shopping_cart.models.product import Product
from shopping_cart.orm.product import ProductRecord
import logging

logger = logging.getLogger(__name__)


class ProductRepository(BaseRepository):
    """Product lookup table keyed by id, partitioned by category"""

    def find_by_id(self, product_id: str) -> Optional[Product]:
        def _read() -> Optional[Product]:
            with self.get_session("find_product") as session:
                row = session.get(ProductRecord, product_id)
                return self._build_product(row) if row else None

        return self.run_read("find_product", _read)

    def find_all(self) -> List[Product]:
        def _read() -> List[Product]:
            with self.get_session("list_products") as session:
                rows = session.execute(
                    select(ProductRecord).order_by(ProductRecord.category, ProductRecord.id)
                ).scalars().all()
                return [self._build_product(row) for row in rows]

        return self.run_read("list_products", _read)

    def find_by_category(self, category: str) -> List[Product]:
        def _read() -> List[Product]:
            with self.get_session("list_products_by_category") as session:
                rows = session.execute(
                    select(ProductRecord)
                    .where(ProductRecord.category == category)
                    .order_by(ProductRecord.id)
                ).scalars().all()
                return [self._build_product(row) for row in rows]

        return self.run_read("list_products_by_category", _read)

    def create(self, product: Product) -> Product:
        with self.get_session("create_product") as session:
            row = ProductRecord(
                id=product.id,
                category=product.category,
                name=product.name,
                description=product.description,
                price=product.price,
                stock_quantity=product.stock_quantity,
            )
            session.add(row)
            session.flush()
            return self._build_product(row)

    def update(self, product: Product) -> Optional[Product]:
        """Replace every mutable field. Returns None if the id is unknown."""
        with self.get_session("update_product") as session:
            row = session.get(ProductRecord, product.id)
            if row is None:
                return None
            row.category = product.category
            row.name = product.name
            row.description = product.description
            row.price = product.price
            row.stock_quantity = product.stock_quantity
            session.flush()
            return self._build_product(row)

    def delete(self, product_id: str) -> bool:
        with self.get_session("delete_product") as session:
            row = session.get(ProductRecord, product_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def _build_product(self, row: ProductRecord) -> Product:
        return Product(
            id=row.id,
            category=row.category,
            name=row.name,
            description=row.description,
            price=row.price,
            stock_quantity=row.stock_quantity,
            created_at=row.created_at,
        )
