"""
Pytest fixtures and configuration for Credit Orders Backend tests

This file provides shared fixtures that can be used across all test modules:
- Real database fixtures (skipped when DATABASE_URL is not configured)
- In-memory repositories and a fake transaction for service tests

Author: TM3
Date: 2025-10-17
"""
import itertools
import os
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

import psycopg2
import pytest
from dotenv import load_dotenv
from psycopg2.extras import RealDictCursor

from credit_orders.domain.customer import Customer
from credit_orders.domain.order import Order, OrderItem, OrderStatus
from credit_orders.domain.product import Product

# Load environment variables for tests
load_dotenv()

NOW = datetime(2025, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# Real database
# ============================================================================

@pytest.fixture(scope="session")
def database_url():
    """
    Provides the database URL for tests

    Scope: session (created once per test session)
    """
    url = os.getenv("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not configured")
    return url


@pytest.fixture(scope="function")
def db_connection(database_url):
    """
    Provides a fresh database connection for each test

    Scope: function (new connection per test)
    Automatically closes connection after test
    """
    conn = psycopg2.connect(database_url)
    yield conn
    conn.close()


@pytest.fixture(scope="function")
def db_cursor(db_connection):
    """
    Provides a database cursor with RealDictCursor for each test
    """
    cursor = db_connection.cursor(cursor_factory=RealDictCursor)
    yield cursor
    cursor.close()


# ============================================================================
# In-memory repositories
# ============================================================================

class FakeConnection:
    """Stands in for a psycopg2 connection inside FakeOrderRepository.transaction()"""

    def __init__(self):
        self.pending = []
        self.committed = False
        self.rolled_back = False


class FakeCustomerRepository:
    def __init__(self, customers):
        self.customers = {customer.id: customer for customer in customers}
        self.calls = []

    def find_by_id(self, customer_id):
        self.calls.append(customer_id)
        return self.customers.get(customer_id)


class FakeProductRepository:
    def __init__(self, products):
        self.products = {product.id: product for product in products}
        self.calls = []

    def find_by_ids(self, product_ids):
        ids = list(product_ids)
        self.calls.append(ids)
        return {pid: self.products[pid] for pid in ids if pid in self.products}


class FakeOrderRepository:
    """
    Order storage with commit/rollback semantics

    Orders created on a FakeConnection only become visible to the ledger
    once transaction() commits. on_ledger_read, if set, is called after
    every ledger read (tests use it to line up concurrent requests).
    """

    def __init__(self):
        self.orders = []
        self.locked = []
        self.create_calls = 0
        self.fail_after_insert = None
        self.on_ledger_read = None
        self.connections = []
        self._order_ids = itertools.count(1)
        self._item_ids = itertools.count(1)
        self._mutex = threading.Lock()

    def add_order(self, customer_id, total_value, created_at, status=OrderStatus.APPROVED):
        with self._mutex:
            order = Order(
                id=next(self._order_ids),
                customer_id=customer_id,
                created_at=created_at,
                status=status,
                total_value=Decimal(total_value),
            )
            self.orders.append(order)
        return order

    def sum_approved_since(self, customer_id, since, conn=None):
        with self._mutex:
            consumed = sum(
                (
                    order.total_value for order in self.orders
                    if order.customer_id == customer_id
                    and order.status == OrderStatus.APPROVED
                    and order.created_at >= since
                ),
                Decimal('0'),
            )
        if self.on_ledger_read is not None:
            self.on_ledger_read()
        return consumed

    def lock_customer_credit(self, conn, customer_id):
        self.locked.append(customer_id)

    def create(self, conn, customer_id, created_at, status, total_value, lines):
        self.create_calls += 1
        with self._mutex:
            order_id = next(self._order_ids)
            items = [
                OrderItem(
                    id=next(self._item_ids),
                    order_id=order_id,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    subtotal=line.subtotal,
                )
                for line in lines
            ]
        order = Order(
            id=order_id,
            customer_id=customer_id,
            created_at=created_at,
            status=status,
            total_value=total_value,
            items=items,
        )
        conn.pending.append(order)

        if self.fail_after_insert is not None:
            raise self.fail_after_insert

        return order

    def find_by_id(self, order_id):
        return next((order for order in self.orders if order.id == order_id), None)

    @contextmanager
    def transaction(self):
        conn = FakeConnection()
        self.connections.append(conn)
        try:
            yield conn
            with self._mutex:
                self.orders.extend(conn.pending)
            conn.committed = True
        except Exception:
            conn.rolled_back = True
            raise


# ============================================================================
# Sample data
# ============================================================================

@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sample_customer():
    return Customer(id=1, name="João Silva Santos", credit_limit=Decimal("5000.00"))


@pytest.fixture
def sample_products():
    return [
        Product(id=1, name="Notebook Dell", unit_price=Decimal("2000.00")),
        Product(id=2, name="Mouse Logitech", unit_price=Decimal("150.00")),
        Product(id=3, name="Monitor Samsung", unit_price=Decimal("600.00")),
    ]


@pytest.fixture
def customer_repo(sample_customer):
    return FakeCustomerRepository([
        sample_customer,
        Customer(id=2, name="Maria Oliveira Costa", credit_limit=Decimal("0.00")),
    ])


@pytest.fixture
def product_repo(sample_products):
    return FakeProductRepository(sample_products)


@pytest.fixture
def order_repo():
    return FakeOrderRepository()


@pytest.fixture
def sample_order_data():
    """
    Provides a sample order creation payload
    """
    return {
        "customer_id": 1,
        "items": [
            {"product_id": 1, "quantity": 2},
        ]
    }
