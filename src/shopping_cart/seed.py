"""
Seed script -- populates the catalog with development products.

Run with:
    python -m shopping_cart.seed

Idempotent: products whose id already exists are skipped, so the script can
be re-run against a populated database.
"""

import logging
from decimal import Decimal

from shopping_cart.core.exceptions import ConflictError
from shopping_cart.db import Base, build_engine, build_session_factory
from shopping_cart.models.product import Product
from shopping_cart.repositories.product_repository import ProductRepository
import shopping_cart.orm  # noqa: F401

logger = logging.getLogger(__name__)

PRODUCTS = [
    Product("elec-laptop-001", "electronics", "ProBook Laptop 15",
            "15-inch laptop, 16 GB RAM, 512 GB SSD.", Decimal("1299.99"), 25),
    Product("elec-phone-002", "electronics", "SmartPhone X12",
            "Flagship smartphone with 6.7-inch display.", Decimal("799.99"), 50),
    Product("cloth-tee-001", "clothing", "Classic Cotton T-Shirt",
            "Soft 100% cotton crew neck.", Decimal("19.99"), 200),
    Product("book-py-001", "books", "Fluent Python",
            "Clear, concise, and effective programming.", Decimal("49.90"), 40),
    Product("book-ddd-002", "books", "Domain-Driven Design",
            "Tackling complexity in the heart of software.", Decimal("54.00"), 0),
]


def seed() -> int:
    engine = build_engine()
    Base.metadata.create_all(engine)
    repo = ProductRepository(build_session_factory(engine))

    created = 0
    for product in PRODUCTS:
        try:
            repo.create(product)
            created += 1
        except ConflictError:
            logger.info(f"Product {product.id} already present, skipping")
    return created


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    count = seed()
    print(f"  [+] {count} products seeded")
