from typing import Optional

from sqlalchemy import select, update

from shopping_cart.repositories.base import BaseRepository
from shopping_cart.models.cart import Cart, CartItem
from shopping_cart.orm.cart import CartDocument
from shopping_cart.core.exceptions import ConflictError
import logging

logger = logging.getLogger(__name__)


class CartRepository(BaseRepository):
    """
    Cart document store, partitioned by user_id.

    upsert replaces the whole document. A cart that was never persisted
    (version is None) is inserted; otherwise the write only lands if the
    stored version still equals the one the caller read, and the version is
    bumped. A stale write raises ConflictError.
    """

    def find_by_partition_key(self, user_id: str) -> Optional[Cart]:
        """Oldest cart in the user's partition, or None"""
        def _read() -> Optional[Cart]:
            with self.get_session("find_cart") as session:
                row = session.execute(
                    select(CartDocument)
                    .where(CartDocument.user_id == user_id)
                    .order_by(CartDocument.created_at, CartDocument.id)
                    .limit(1)
                ).scalar_one_or_none()
                return self._build_cart(row) if row else None

        return self.run_read("find_cart", _read)

    def upsert(self, cart: Cart) -> Cart:
        document = cart.to_document()

        with self.get_session("upsert_cart") as session:
            if cart.version is None:
                session.add(CartDocument(
                    id=cart.id,
                    user_id=cart.user_id,
                    items=document["items"],
                    version=1,
                ))
                session.flush()
                new_version = 1
            else:
                result = session.execute(
                    update(CartDocument)
                    .where(
                        CartDocument.id == cart.id,
                        CartDocument.user_id == cart.user_id,
                        CartDocument.version == cart.version,
                    )
                    .values(items=document["items"], version=cart.version + 1)
                )
                if result.rowcount == 0:
                    logger.warning(f"Stale write for cart {cart.id} at version {cart.version}")
                    raise ConflictError(
                        f"Cart {cart.id} was modified concurrently",
                        conflict_field="version"
                    )
                new_version = cart.version + 1

        cart.version = new_version
        return cart

    def _build_cart(self, row: CartDocument) -> Cart:
        return Cart(
            id=row.id,
            user_id=row.user_id,
            items=[CartItem.from_document(item) for item in (row.items or [])],
            version=row.version,
        )
