from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, Text
from sqlalchemy.dialects.postgresql import JSONB

from shopping_cart.db import Base


class CartDocument(Base):
    """
    One cart document per row, partitioned by user_id.

    The item list is stored whole in a JSON column and rewritten on every
    mutation; there is no per-item table. version is the optimistic
    concurrency token: writers must present the version they read and the
    row is only replaced if it still matches.

    user_id is indexed but not unique -- the oldest cart for a user wins.
    """

    __tablename__ = "carts"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, nullable=False, index=True)
    items = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<CartDocument id={self.id} user_id={self.user_id} version={self.version}>"
