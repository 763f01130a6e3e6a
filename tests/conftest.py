"""
Shared fixtures.

Everything runs against a private in-memory SQLite database per test, using
the real repositories and services (no mocking of internal components).
"""
from decimal import Decimal

import pytest
from sqlalchemy.pool import StaticPool

from shopping_cart.db import Base, build_engine, build_session_factory
from shopping_cart.main import create_app
from shopping_cart.models.product import Product
from shopping_cart.repositories.cart_repository import CartRepository
from shopping_cart.repositories.product_repository import ProductRepository
from shopping_cart.services.cart_service import CartService
import shopping_cart.orm  # noqa: F401


CATALOG = [
    Product("p1", "stationery", "Notebook", "A5 dotted notebook", Decimal("5.00"), 100),
    Product("p2", "stationery", "Fountain Pen", "Steel nib", Decimal("10.00"), 20),
    Product("p3", "books", "Fluent Python", None, Decimal("49.90"), 3),
]


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def product_repository(session_factory):
    repo = ProductRepository(session_factory, read_retries=1)
    for product in CATALOG:
        repo.create(product)
    return repo


@pytest.fixture
def cart_repository(session_factory):
    return CartRepository(session_factory, read_retries=1)


@pytest.fixture
def cart_service(cart_repository, product_repository):
    return CartService(cart_repository, product_repository, conflict_retries=3, max_items_per_cart=100)


@pytest.fixture
def app(engine, product_repository):
    app = create_app(engine=engine, create_schema=True)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
