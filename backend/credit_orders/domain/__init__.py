"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities,
the credit decision rule and the order error taxonomy.

Author: TM3
Date: 2025-10-17
"""
from credit_orders.domain.customer import Customer
from credit_orders.domain.product import Product
from credit_orders.domain.order import (
    CreditSnapshot,
    Order,
    OrderCreate,
    OrderItem,
    OrderItemCreate,
    OrderLine,
    OrderStatus,
)
from credit_orders.domain.credit import CreditBalance, decide_status

__all__ = [
    'Customer',
    'Product',
    'CreditSnapshot',
    'Order',
    'OrderCreate',
    'OrderItem',
    'OrderItemCreate',
    'OrderLine',
    'OrderStatus',
    'CreditBalance',
    'decide_status',
]
