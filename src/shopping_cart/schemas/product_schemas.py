from typing import Optional

from marshmallow import EXCLUDE, Schema, fields, validate
from pydantic import BaseModel, ConfigDict, Field

from shopping_cart.models.product import Product
from shopping_cart.schemas.common_schemas import format_money


class ProductSchema(Schema):
    """Body of POST /api/products and PUT /api/products/<id>"""
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(load_default=None, validate=validate.Length(min=1, max=100))
    category = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    name = fields.Str(required=True, validate=validate.Length(min=1, max=500))
    description = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=2000))
    price = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    stock_quantity = fields.Int(
        load_default=0, data_key="stockQuantity", validate=validate.Range(min=0)
    )


class ProductResponse(BaseModel):
    """Catalog product in API responses"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    category: str
    name: str
    description: Optional[str] = None
    price: str
    stock_quantity: int = Field(alias="stockQuantity", ge=0)

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            category=product.category,
            name=product.name,
            description=product.description,
            price=format_money(product.price),
            stock_quantity=product.stock_quantity,
        )
