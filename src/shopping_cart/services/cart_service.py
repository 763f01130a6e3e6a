import uuid
from typing import Callable, Optional

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random,
)

from shopping_cart.repositories.cart_repository import CartRepository
from shopping_cart.repositories.product_repository import ProductRepository
from shopping_cart.models.cart import Cart, validate_quantity
from shopping_cart.core.config import config
from shopping_cart.core.exceptions import ConflictError, ProductNotFoundError
import logging

logger = logging.getLogger(__name__)


class CartService:
    """
    Shopping cart orchestration service

    Every operation follows the same protocol: load the user's cart (creating
    it if needed), apply one in-memory mutation, then write the whole
    document back. The write is guarded by the cart's version token; on a
    concurrent modification the whole cycle is replayed against a fresh read,
    up to conflict_retries attempts, after which ConflictError propagates.

    Store errors are not caught here.
    """

    def __init__(
        self,
        cart_repository: CartRepository,
        product_repository: ProductRepository,
        conflict_retries: Optional[int] = None,
        max_items_per_cart: Optional[int] = None,
    ):
        self.cart_repo = cart_repository
        self.product_repo = product_repository
        self.conflict_retries = (
            conflict_retries if conflict_retries is not None else config.cart.conflict_retries
        )
        self.max_items_per_cart = (
            max_items_per_cart if max_items_per_cart is not None else config.cart.max_items_per_cart
        )
        if self.conflict_retries < 1:
            raise ValueError("conflict_retries must be at least 1")
        if self.max_items_per_cart < 1:
            raise ValueError("max_items_per_cart must be at least 1")

    def get_or_create_cart(self, user_id: str) -> Cart:
        """
        Return the user's cart, persisting a new empty one if none exists.

        Note this writes on a miss, so even a plain read of a new user's cart
        creates a document.

        Two requests can both miss and both insert. After inserting, the
        partition is read again and whichever cart it returns (the oldest) is
        used, so every caller mutates the same document and the version check
        catches the race.
        """
        cart = self.cart_repo.find_by_partition_key(user_id)
        if cart is not None:
            return cart

        cart = Cart(id=str(uuid.uuid4()), user_id=user_id, items=[])
        logger.info(f"Creating cart {cart.id} for user {user_id}")
        saved = self.cart_repo.upsert(cart)

        winner = self.cart_repo.find_by_partition_key(user_id)
        if winner is None:
            return saved
        if winner.id != saved.id:
            logger.warning(
                f"Concurrent cart creation for user {user_id}: using {winner.id}, "
                f"abandoning {saved.id}"
            )
        return winner

    def get_cart(self, user_id: str) -> Cart:
        """Same as get_or_create_cart, including the create side effect"""
        return self.get_or_create_cart(user_id)

    def add_item(self, user_id: str, product_id: str, quantity: int) -> Cart:
        """
        Add quantity units of a catalog product.

        Raises ProductNotFoundError before anything is written if the product
        is not in the catalog.
        """
        logger.info(f"Adding item to cart - user: {user_id}, product: {product_id}, quantity: {quantity}")
        validate_quantity(quantity)

        def mutation(cart: Cart) -> None:
            product = self.product_repo.find_by_id(product_id)
            if product is None:
                logger.warning(f"Product {product_id} not found for user {user_id}")
                raise ProductNotFoundError(product_id)
            cart.merge_or_add_item(product, quantity, max_items=self.max_items_per_cart)

        return self._mutate(user_id, "add_item", mutation)

    def update_item_quantity(self, user_id: str, product_id: str, quantity: int) -> Cart:
        logger.info(f"Updating product {product_id} for user {user_id} to quantity {quantity}")
        validate_quantity(quantity)
        return self._mutate(
            user_id, "update_item_quantity",
            lambda cart: cart.set_item_quantity(product_id, quantity)
        )

    def remove_item(self, user_id: str, product_id: str) -> Cart:
        logger.info(f"Removing product {product_id} from cart for user {user_id}")
        return self._mutate(user_id, "remove_item", lambda cart: cart.remove_item(product_id))

    def clear_cart(self, user_id: str) -> None:
        logger.info(f"Clearing cart for user {user_id}")
        self._mutate(user_id, "clear_cart", lambda cart: cart.clear())

    def _mutate(self, user_id: str, operation: str, mutation: Callable[[Cart], object]) -> Cart:
        retrying = Retrying(
            retry=retry_if_exception_type(ConflictError),
            stop=stop_after_attempt(self.conflict_retries),
            wait=wait_random(min=0.01, max=0.1),
            before_sleep=lambda state: logger.warning(
                f"{operation}: version conflict for user {user_id} "
                f"(attempt {state.attempt_number}/{self.conflict_retries}), retrying"
            ),
            reraise=True,
        )
        return retrying(self._read_modify_write, user_id, mutation)

    def _read_modify_write(self, user_id: str, mutation: Callable[[Cart], object]) -> Cart:
        cart = self.get_or_create_cart(user_id)
        mutation(cart)
        saved = self.cart_repo.upsert(cart)
        logger.info(f"Saved cart {saved.id} for user {user_id} at version {saved.version}")
        return saved
