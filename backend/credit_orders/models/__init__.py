"""
Database table definitions (SQLAlchemy)

Used for schema bootstrap only; runtime queries go through the
psycopg2 repositories.
"""
from .customer import Customer
from .product import Product
from .order import Order, OrderItem

__all__ = [
    "Customer",
    "Product",
    "Order",
    "OrderItem",
]
