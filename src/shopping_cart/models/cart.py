from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, NamedTuple, Optional

from shopping_cart.core.exceptions import CartLimitError, InvalidQuantityError
from shopping_cart.models.product import Product


def validate_quantity(quantity: Any) -> int:
    """Reject anything that is not a whole number of units >= 1."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantityError(quantity)
    return quantity


class CartTotals(NamedTuple):
    total_amount: Decimal
    total_items: int


@dataclass
class CartItem:
    """
    A product line inside a cart.

    product_name and price are copied from the catalog when the line is
    first added and are never refreshed afterwards.
    """
    product_id: str
    product_name: str
    price: Decimal  # Price at time of adding to cart
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    def to_document(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "price": str(self.price),
            "quantity": self.quantity,
        }

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "CartItem":
        return cls(
            product_id=data["productId"],
            product_name=data["productName"],
            price=Decimal(str(data["price"])),
            quantity=int(data["quantity"]),
        )


@dataclass
class Cart:
    """
    A user's shopping cart.

    The cart owns its item list outright. Mutations happen in memory and the
    whole document is handed back to the store afterwards. Every guard runs
    before the item list is touched, so a rejected call leaves the cart
    exactly as it was.

    version is None until the cart has been persisted once.
    """
    id: str
    user_id: str  # Partition key
    items: List[CartItem] = field(default_factory=list)
    version: Optional[int] = None

    @property
    def total_amount(self) -> Decimal:
        return self.compute_totals().total_amount

    @property
    def total_items(self) -> int:
        return self.compute_totals().total_items

    def get_item(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

    def merge_or_add_item(
        self,
        product: Product,
        quantity: int,
        max_items: Optional[int] = None,
    ) -> "Cart":
        """
        Add quantity units of product.

        An existing line for the same product only has its quantity raised;
        its name and price snapshot stay as they were. Otherwise a new line
        is appended with the product's current name and price.
        """
        validate_quantity(quantity)

        existing = self.get_item(product.id)
        if existing:
            existing.quantity += quantity
            return self

        if max_items is not None and len(self.items) >= max_items:
            raise CartLimitError(max_items)

        self.items.append(CartItem(
            product_id=product.id,
            product_name=product.name,
            price=Decimal(product.price),
            quantity=quantity,
        ))
        return self

    def set_item_quantity(self, product_id: str, quantity: int) -> "Cart":
        """Overwrite the quantity of a line. Unknown product_id is a no-op."""
        validate_quantity(quantity)

        item = self.get_item(product_id)
        if item:
            item.quantity = quantity
        return self

    def remove_item(self, product_id: str) -> "Cart":
        self.items = [item for item in self.items if item.product_id != product_id]
        return self

    def clear(self) -> "Cart":
        self.items.clear()
        return self

    def compute_totals(self) -> CartTotals:
        return CartTotals(
            total_amount=sum((item.subtotal for item in self.items), Decimal("0")),
            total_items=sum(item.quantity for item in self.items),
        )

    def to_document(self) -> Dict[str, Any]:
        """Persisted shape. Totals are derived and never stored."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "items": [item.to_document() for item in self.items],
        }
