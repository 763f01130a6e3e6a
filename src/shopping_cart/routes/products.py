from flask import Blueprint, abort, request

from shopping_cart.core.dependencies import get_product_service
from shopping_cart.core.exceptions import ValidationError
from shopping_cart.schemas.common_schemas import load_or_raise
from shopping_cart.schemas.product_schemas import ProductResponse, ProductSchema
from shopping_cart.routes.utils import no_content, success_response

products_bp = Blueprint("products", __name__)

_product_schema = ProductSchema()


def _product_payload(product) -> dict:
    return ProductResponse.from_product(product).model_dump(by_alias=True, mode="json")


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


@products_bp.route("", methods=["POST"])
def create_product():
    data = load_or_raise(_product_schema, _json_body())
    product = get_product_service().create_product(data)
    return success_response(_product_payload(product), "Product created.", 201)


@products_bp.route("", methods=["GET"])
def list_products():
    products = get_product_service().get_all_products()
    return success_response([_product_payload(p) for p in products])


@products_bp.route("/<product_id>", methods=["GET"])
def get_product(product_id: str):
    product = get_product_service().get_product_by_id(product_id)
    if product is None:
        abort(404, f"Product {product_id} not found.")
    return success_response(_product_payload(product))


@products_bp.route("/category/<category>", methods=["GET"])
def list_products_by_category(category: str):
    products = get_product_service().get_products_by_category(category)
    return success_response([_product_payload(p) for p in products])


@products_bp.route("/<product_id>", methods=["PUT"])
def update_product(product_id: str):
    data = load_or_raise(_product_schema, _json_body())
    product = get_product_service().update_product(product_id, data)
    return success_response(_product_payload(product), "Product updated.")


@products_bp.route("/<product_id>", methods=["DELETE"])
def delete_product(product_id: str):
    get_product_service().delete_product(product_id)
    return no_content()
