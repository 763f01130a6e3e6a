from flask import Blueprint, request

from shopping_cart.core.dependencies import get_cart_service
from shopping_cart.schemas.cart_schemas import (
    AddItemQuerySchema, CartResponse, UpdateItemQuerySchema
)
from shopping_cart.schemas.common_schemas import load_or_raise
from shopping_cart.routes.utils import no_content, success_response

cart_bp = Blueprint("cart", __name__)

_add_schema = AddItemQuerySchema()
_update_schema = UpdateItemQuerySchema()


def _cart_payload(cart) -> dict:
    return CartResponse.from_cart(cart).model_dump(by_alias=True, mode="json")


@cart_bp.route("/<user_id>", methods=["GET"])
def get_cart(user_id: str):
    """Return the user's cart, creating an empty one if it doesn't exist."""
    cart = get_cart_service().get_cart(user_id)
    return success_response(_cart_payload(cart))


@cart_bp.route("/<user_id>/items", methods=["POST"])
def add_item(user_id: str):
    """Add a product to the cart, or increment its quantity if already present."""
    params = load_or_raise(_add_schema, request.args.to_dict())

    cart = get_cart_service().add_item(user_id, params["product_id"], params["quantity"])
    return success_response(_cart_payload(cart), "Item added to cart.")


@cart_bp.route("/<user_id>/items/<product_id>", methods=["PUT"])
def update_item_quantity(user_id: str, product_id: str):
    """Set the quantity of a cart line. Unknown products leave the cart unchanged."""
    params = load_or_raise(_update_schema, request.args.to_dict())

    cart = get_cart_service().update_item_quantity(user_id, product_id, params["quantity"])
    return success_response(_cart_payload(cart), "Cart item updated.")


@cart_bp.route("/<user_id>/items/<product_id>", methods=["DELETE"])
def remove_item(user_id: str, product_id: str):
    """Remove a product from the cart. Removing an absent product is not an error."""
    cart = get_cart_service().remove_item(user_id, product_id)
    return success_response(_cart_payload(cart), "Item removed from cart.")


@cart_bp.route("/<user_id>", methods=["DELETE"])
def clear_cart(user_id: str):
    get_cart_service().clear_cart(user_id)
    return no_content()
