"""
Products table
"""
from sqlalchemy import CheckConstraint, Column, DECIMAL, Integer, String

from credit_orders.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False, index=True)
    unit_price = Column(DECIMAL(15, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("unit_price > 0", name="ck_products_unit_price_positive"),
    )
