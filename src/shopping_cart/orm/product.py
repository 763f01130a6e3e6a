from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, Text

from shopping_cart.db import Base


class ProductRecord(Base):
    """
    A catalog product, partitioned by category.

    Carts copy name and price out of this row when an item is first added;
    later edits here are not pushed into existing carts.
    """

    __tablename__ = "products"

    id = Column(Text, primary_key=True)
    category = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price"),
        CheckConstraint("stock_quantity >= 0", name="ck_product_stock"),
    )

    def __repr__(self) -> str:
        return f"<ProductRecord id={self.id} category={self.category!r} name={self.name!r}>"
