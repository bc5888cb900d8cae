"""
Customers table
"""
from sqlalchemy import CheckConstraint, Column, DECIMAL, Integer, String

from credit_orders.core.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    credit_limit = Column(DECIMAL(15, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("credit_limit >= 0", name="ck_customers_credit_limit_non_negative"),
    )
