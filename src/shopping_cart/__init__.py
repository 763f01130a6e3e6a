"""Shopping cart service: product catalog plus per-user carts on a partitioned document store."""

__version__ = "0.1.0"
