from typing import List

from marshmallow import EXCLUDE, Schema, fields, validate
from pydantic import BaseModel, ConfigDict, Field

from shopping_cart.models.cart import Cart, CartItem
from shopping_cart.schemas.common_schemas import format_money


# Request parameters. Quantity range is checked by the cart itself so the
# caller gets INVALID_QUANTITY rather than a generic schema error.

class AddItemQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    product_id = fields.Str(required=True, data_key="productId", validate=validate.Length(min=1))
    quantity = fields.Int(required=True)


class UpdateItemQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    quantity = fields.Int(required=True)


# Responses

class CartItemResponse(BaseModel):
    """Cart line in API responses"""
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId", description="Catalog product identifier")
    product_name: str = Field(alias="productName", description="Product name when added")
    price: str = Field(description="Unit price when added")
    quantity: int = Field(ge=1, description="Units in cart")
    subtotal: str = Field(description="price x quantity")

    @classmethod
    def from_item(cls, item: CartItem) -> "CartItemResponse":
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            price=format_money(item.price),
            quantity=item.quantity,
            subtotal=format_money(item.subtotal),
        )


class CartResponse(BaseModel):
    """Complete cart with derived totals"""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "6f1c2e9a-1b7d-4c1e-9a55-0c5b8f0e2d11",
                "userId": "u1",
                "items": [
                    {
                        "productId": "p1",
                        "productName": "Notebook",
                        "price": "5.00",
                        "quantity": 5,
                        "subtotal": "25.00"
                    }
                ],
                "totalAmount": "25.00",
                "totalItems": 5
            }
        },
    )

    id: str = Field(description="Cart identifier")
    user_id: str = Field(alias="userId", description="Owning user (partition key)")
    items: List[CartItemResponse] = Field(description="Cart lines in insertion order")
    total_amount: str = Field(alias="totalAmount", description="Sum of line subtotals")
    total_items: int = Field(alias="totalItems", ge=0, description="Sum of quantities")

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        totals = cart.compute_totals()
        return cls(
            id=cart.id,
            user_id=cart.user_id,
            items=[CartItemResponse.from_item(item) for item in cart.items],
            total_amount=format_money(totals.total_amount),
            total_items=totals.total_items,
        )
