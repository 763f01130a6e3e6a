from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Product:
    """A catalog entry. Read-only from the cart's point of view."""
    id: str
    category: str  # Partition key
    name: str
    description: Optional[str]
    price: Decimal
    stock_quantity: int
    created_at: Optional[datetime] = None
