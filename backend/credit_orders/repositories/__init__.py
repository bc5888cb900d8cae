"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.

Author: TM3
Date: 2025-10-17
"""
from credit_orders.repositories.customer_repository import CustomerRepository
from credit_orders.repositories.product_repository import ProductRepository
from credit_orders.repositories.order_repository import OrderRepository

__all__ = [
    'CustomerRepository',
    'ProductRepository',
    'OrderRepository',
]
