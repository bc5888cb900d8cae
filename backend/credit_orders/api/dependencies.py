"""
FastAPI dependencies

Routers receive repositories and services through Depends so tests can
swap them with app.dependency_overrides.
"""
from credit_orders.repositories.customer_repository import CustomerRepository
from credit_orders.repositories.order_repository import OrderRepository
from credit_orders.repositories.product_repository import ProductRepository
from credit_orders.services.credit_service import CreditService
from credit_orders.services.order_service import OrderService


def get_customer_repository() -> CustomerRepository:
    return CustomerRepository()


def get_product_repository() -> ProductRepository:
    return ProductRepository()


def get_order_repository() -> OrderRepository:
    return OrderRepository()


def get_credit_service() -> CreditService:
    return CreditService()


def get_order_service() -> OrderService:
    return OrderService()
