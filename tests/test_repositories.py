from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from shopping_cart.core.exceptions import ConflictError, StoreUnavailableError
from shopping_cart.db import build_engine, build_session_factory
from shopping_cart.models.cart import Cart, CartItem
from shopping_cart.models.product import Product
from shopping_cart.orm.cart import CartDocument
from shopping_cart.repositories.cart_repository import CartRepository
from shopping_cart.repositories.product_repository import ProductRepository


class TestCartRepository:

    def test_missing_partition_returns_none(self, cart_repository):
        assert cart_repository.find_by_partition_key("nobody") is None

    def test_insert_then_find(self, cart_repository):
        cart = Cart(id="c1", user_id="u1", items=[CartItem("p1", "Notebook", Decimal("5.00"), 2)])

        saved = cart_repository.upsert(cart)
        found = cart_repository.find_by_partition_key("u1")

        assert saved.version == 1
        assert found == Cart("c1", "u1", [CartItem("p1", "Notebook", Decimal("5.00"), 2)], 1)

    def test_update_bumps_version(self, cart_repository):
        cart_repository.upsert(Cart(id="c1", user_id="u1"))

        cart = cart_repository.find_by_partition_key("u1")
        cart.items.append(CartItem("p2", "Fountain Pen", Decimal("10.00"), 1))
        saved = cart_repository.upsert(cart)

        assert saved.version == 2
        assert cart_repository.find_by_partition_key("u1").items[0].product_id == "p2"

    def test_stale_write_is_rejected(self, cart_repository):
        cart_repository.upsert(Cart(id="c1", user_id="u1"))
        first = cart_repository.find_by_partition_key("u1")
        second = cart_repository.find_by_partition_key("u1")

        first.items.append(CartItem("p1", "Notebook", Decimal("5.00"), 1))
        cart_repository.upsert(first)

        second.items.append(CartItem("p2", "Fountain Pen", Decimal("10.00"), 1))
        with pytest.raises(ConflictError):
            cart_repository.upsert(second)

        stored = cart_repository.find_by_partition_key("u1")
        assert [i.product_id for i in stored.items] == ["p1"]
        assert stored.version == 2

    def test_duplicate_insert_is_a_conflict(self, cart_repository):
        cart_repository.upsert(Cart(id="c1", user_id="u1"))

        with pytest.raises(ConflictError):
            cart_repository.upsert(Cart(id="c1", user_id="u1"))

    def test_oldest_cart_in_partition_wins(self, cart_repository, session_factory):
        now = datetime.now(timezone.utc)
        with session_factory() as session:
            session.add(CartDocument(id="newer", user_id="u1", items=[], version=1, created_at=now))
            session.add(CartDocument(
                id="older", user_id="u1", items=[], version=1, created_at=now - timedelta(minutes=5)
            ))
            session.commit()

        assert cart_repository.find_by_partition_key("u1").id == "older"

    def test_partitions_are_isolated(self, cart_repository):
        cart_repository.upsert(Cart(id="c1", user_id="u1"))
        cart_repository.upsert(Cart(id="c2", user_id="u2"))

        assert cart_repository.find_by_partition_key("u2").id == "c2"


class TestProductRepository:

    def test_find_by_id(self, product_repository):
        product = product_repository.find_by_id("p1")

        assert product.name == "Notebook"
        assert product.price == Decimal("5.00")
        assert product.category == "stationery"

    def test_find_by_id_missing(self, product_repository):
        assert product_repository.find_by_id("missing") is None

    def test_find_by_category(self, product_repository):
        ids = [p.id for p in product_repository.find_by_category("stationery")]

        assert ids == ["p1", "p2"]

    def test_duplicate_id_is_a_conflict(self, product_repository):
        with pytest.raises(ConflictError):
            product_repository.create(
                Product("p1", "other", "Dup", None, Decimal("1.00"), 1)
            )

    def test_update_and_delete(self, product_repository):
        updated = product_repository.update(
            Product("p2", "pens", "Fountain Pen", "Gold nib", Decimal("12.00"), 5)
        )

        assert updated.category == "pens"
        assert product_repository.find_by_id("p2").price == Decimal("12.00")
        assert product_repository.delete("p2") is True
        assert product_repository.delete("p2") is False
        assert product_repository.update(
            Product("p2", "pens", "x", None, Decimal("1"), 0)
        ) is None


class TestStoreUnavailable:

    @pytest.fixture
    def broken_factory(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'missing' / 'store.db'}")
        real_factory = build_session_factory(engine)
        calls = []

        def factory():
            calls.append(1)
            return real_factory()

        factory.calls = calls
        yield factory
        engine.dispose()

    def test_reads_are_retried_then_surface_unavailable(self, broken_factory):
        repo = CartRepository(broken_factory, read_retries=2)

        with pytest.raises(StoreUnavailableError) as exc_info:
            repo.find_by_partition_key("u1")

        assert len(broken_factory.calls) == 2
        assert exc_info.value.status_code == 503

    def test_writes_are_not_retried(self, broken_factory):
        repo = ProductRepository(broken_factory, read_retries=3)

        with pytest.raises(StoreUnavailableError):
            repo.create(Product("x", "c", "X", None, Decimal("1.00"), 1))

        assert len(broken_factory.calls) == 1
