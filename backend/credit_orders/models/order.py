"""
Orders and order items tables

No ORM relationships: rows reference each other by foreign-key id only.
"""
from sqlalchemy import CheckConstraint, Column, DateTime, DECIMAL, ForeignKey, Index, Integer, String
from sqlalchemy.sql import func

from credit_orders.core.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    status = Column(String(20), nullable=False)
    total_value = Column(DECIMAL(15, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("status IN ('APPROVED', 'REJECTED')", name="ck_orders_status"),
        # Credit ledger query: customer + status + window lower bound
        Index("ix_orders_customer_status_created", "customer_id", "status", "created_at"),
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    # Price at the moment of sale, never re-read from products
    unit_price = Column(DECIMAL(15, 2), nullable=False)
    subtotal = Column(DECIMAL(15, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )
