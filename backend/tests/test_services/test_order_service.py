"""
Unit tests for OrderService and CreditService

Run against in-memory repositories (see conftest.py) so the credit
decision, atomicity and error paths can be checked without a database.

Author: TM3
Date: 2025-10-17
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from decimal import Decimal

import psycopg2
import pytest

from credit_orders.domain.errors import (
    CustomerNotFound,
    InvalidRequest,
    OrderNotFound,
    PersistenceFailure,
    ProductNotFound,
)
from credit_orders.domain.order import OrderCreate, OrderStatus
from credit_orders.services.credit_service import CreditService
from credit_orders.services.order_service import OrderService


@pytest.fixture
def credit_service(customer_repo, order_repo, now):
    return CreditService(
        customer_repo=customer_repo,
        order_repo=order_repo,
        window_days=30,
        clock=lambda: now,
    )


@pytest.fixture
def service(customer_repo, product_repo, order_repo, credit_service):
    return OrderService(
        customer_repo=customer_repo,
        product_repo=product_repo,
        order_repo=order_repo,
        credit_service=credit_service,
        transaction_factory=order_repo.transaction,
        serialize_credit_checks=False,
    )


def order_request(customer_id=1, *items):
    return OrderCreate(
        customer_id=customer_id,
        items=[{"product_id": pid, "quantity": qty} for pid, qty in items],
    )


class TestCreateOrderDecision:
    """Test suite for the credit decision of new orders"""

    def test_first_order_within_limit_is_approved(self, service, order_repo):
        """Limit 5000, no history, order of 4000"""
        order = service.create_order(order_request(1, (1, 2)))

        assert order.status == OrderStatus.APPROVED
        assert order.total_value == Decimal("4000.00")
        assert order.credit.consumed_credit == Decimal("0")
        assert order.credit.available_balance == Decimal("5000.00")
        assert order.credit.remaining_balance == Decimal("1000.00")
        assert order.customer_name == "João Silva Santos"
        assert order_repo.orders == [order]

    def test_order_over_available_balance_is_rejected_and_stored(self, service, order_repo, now):
        """Limit 5000, approved order of 4500 twenty days ago, new order of 600"""
        order_repo.add_order(1, "4500.00", now - timedelta(days=20))

        order = service.create_order(order_request(1, (3, 1)))

        assert order.status == OrderStatus.REJECTED
        assert order.credit.consumed_credit == Decimal("4500.00")
        assert order.credit.available_balance == Decimal("500.00")
        assert order.credit.remaining_balance == Decimal("500.00")
        assert order in order_repo.orders
        assert len(order_repo.orders) == 2

    def test_orders_older_than_window_do_not_count(self, service, order_repo, now):
        """Same history as above but the prior order is 35 days old"""
        order_repo.add_order(1, "4500.00", now - timedelta(days=35))

        order = service.create_order(order_request(1, (3, 1)))

        assert order.status == OrderStatus.APPROVED
        assert order.credit.consumed_credit == Decimal("0")

    def test_order_exactly_at_window_start_counts(self, service, order_repo, now):
        order_repo.add_order(1, "4500.00", now - timedelta(days=30))

        order = service.create_order(order_request(1, (3, 1)))

        assert order.status == OrderStatus.REJECTED
        assert order.credit.consumed_credit == Decimal("4500.00")

    def test_order_just_outside_window_does_not_count(self, service, order_repo, now):
        order_repo.add_order(1, "4500.00", now - timedelta(days=30, seconds=1))

        order = service.create_order(order_request(1, (3, 1)))

        assert order.status == OrderStatus.APPROVED

    def test_rejected_orders_do_not_consume_credit(self, service, order_repo, now):
        order_repo.add_order(1, "4500.00", now - timedelta(days=1), status=OrderStatus.REJECTED)

        order = service.create_order(order_request(1, (1, 2)))

        assert order.status == OrderStatus.APPROVED
        assert order.credit.consumed_credit == Decimal("0")

    def test_order_using_exact_remaining_balance_is_approved(self, service, order_repo, now):
        order_repo.add_order(1, "1000.00", now - timedelta(days=3))

        order = service.create_order(order_request(1, (1, 2)))

        assert order.status == OrderStatus.APPROVED
        assert order.credit.remaining_balance == Decimal("0")

    def test_zero_limit_customer_is_rejected(self, service):
        order = service.create_order(order_request(2, (2, 1)))

        assert order.status == OrderStatus.REJECTED
        assert order.credit.available_balance == Decimal("0")

    def test_other_customers_orders_do_not_count(self, service, order_repo, now):
        order_repo.add_order(2, "4500.00", now - timedelta(days=1))

        order = service.create_order(order_request(1, (1, 2)))

        assert order.status == OrderStatus.APPROVED

    def test_order_is_stamped_with_decision_instant(self, service, now):
        order = service.create_order(order_request(1, (2, 1)))

        assert order.created_at == now


class TestCreateOrderPricing:

    def test_prices_are_frozen_per_line(self, service, product_repo):
        order = service.create_order(order_request(1, (1, 1), (2, 3)))

        # Catalog change after creation leaves the order untouched
        product_repo.products[1] = product_repo.products[1].model_copy(
            update={'unit_price': Decimal("9999.00")}
        )

        assert [item.unit_price for item in order.items] == [Decimal("2000.00"), Decimal("150.00")]
        assert [item.subtotal for item in order.items] == [Decimal("2000.00"), Decimal("450.00")]
        assert order.total_value == Decimal("2450.00")
        assert order.total_quantity == 4

    def test_repeated_product_is_looked_up_once_and_kept_as_separate_lines(self, service, product_repo):
        order = service.create_order(order_request(1, (2, 1), (2, 2)))

        assert product_repo.calls == [[2]]
        assert order.item_count == 2
        assert order.total_value == Decimal("450.00")


class TestCreateOrderErrors:
    """Test suite for the failure paths of order creation"""

    def test_empty_items_fails_before_any_lookup(self, service, customer_repo, product_repo, order_repo):
        with pytest.raises(InvalidRequest) as exc_info:
            service.create_order(order_request(1))

        assert exc_info.value.errors == ["items: order must have at least one item"]
        assert customer_repo.calls == []
        assert product_repo.calls == []
        assert order_repo.create_calls == 0

    def test_non_positive_quantity_is_invalid(self, service, customer_repo):
        with pytest.raises(InvalidRequest):
            service.create_order(order_request(1, (1, 0)))

        assert customer_repo.calls == []

    def test_unknown_customer(self, service, product_repo, order_repo):
        with pytest.raises(CustomerNotFound) as exc_info:
            service.create_order(order_request(77, (1, 1)))

        assert exc_info.value.customer_id == 77
        assert product_repo.calls == []
        assert order_repo.orders == []

    def test_unknown_product_names_the_id_and_stores_nothing(self, service, order_repo):
        with pytest.raises(ProductNotFound) as exc_info:
            service.create_order(order_request(1, (1, 1), (99, 1)))

        assert exc_info.value.product_ids == [99]
        assert order_repo.create_calls == 0
        assert order_repo.orders == []

    def test_every_missing_product_is_reported(self, service):
        with pytest.raises(ProductNotFound) as exc_info:
            service.create_order(order_request(1, (98, 1), (1, 1), (97, 2)))

        assert exc_info.value.product_ids == [97, 98]

    def test_quantity_beyond_storage_range_is_invalid(self, service, customer_repo, order_repo):
        with pytest.raises(InvalidRequest):
            service.create_order(order_request(1, (1, 2**31)))

        assert customer_repo.calls == []
        assert order_repo.create_calls == 0

    def test_total_beyond_storage_range_is_invalid(self, service, order_repo):
        """Three lines of 2e9 notebooks at 2000 each total 1.2e13"""
        request = order_request(1, (1, 2_000_000_000), (1, 2_000_000_000), (1, 2_000_000_000))

        with pytest.raises(InvalidRequest) as exc_info:
            service.create_order(request)

        assert exc_info.value.errors[0].startswith("total_value must not exceed")
        assert order_repo.connections == []
        assert order_repo.orders == []

    def test_storage_failure_rolls_back_whole_order(self, service, order_repo):
        order_repo.fail_after_insert = psycopg2.OperationalError("server closed the connection unexpectedly")

        with pytest.raises(PersistenceFailure) as exc_info:
            service.create_order(order_request(1, (1, 1)))

        assert isinstance(exc_info.value.__cause__, psycopg2.OperationalError)
        assert order_repo.connections[0].rolled_back
        assert not order_repo.connections[0].committed
        assert order_repo.orders == []


class TestCreditSerialization:

    def test_lock_is_taken_when_enabled(self, customer_repo, product_repo, order_repo, credit_service):
        service = OrderService(
            customer_repo=customer_repo,
            product_repo=product_repo,
            order_repo=order_repo,
            credit_service=credit_service,
            transaction_factory=order_repo.transaction,
            serialize_credit_checks=True,
        )

        service.create_order(order_request(1, (2, 1)))

        assert order_repo.locked == [1]

    def test_no_lock_by_default(self, service, order_repo):
        service.create_order(order_request(1, (2, 1)))

        assert order_repo.locked == []

    def test_concurrent_orders_can_both_pass_the_credit_check(self, service, order_repo):
        """
        Both requests read consumed credit before either commits, so each
        sees the full 5000 and both 4000 orders are approved.
        """
        barrier = threading.Barrier(2, timeout=5)
        order_repo.on_ledger_read = barrier.wait

        with ThreadPoolExecutor(max_workers=2) as executor:
            futures = [executor.submit(service.create_order, order_request(1, (1, 2))) for _ in range(2)]
            orders = [future.result(timeout=10) for future in futures]

        assert [order.status for order in orders] == [OrderStatus.APPROVED, OrderStatus.APPROVED]
        approved_total = sum(order.total_value for order in order_repo.orders)
        assert approved_total == Decimal("8000.00")
        assert approved_total > Decimal("5000.00")


class TestOrderQueries:

    def test_get_order(self, service):
        created = service.create_order(order_request(1, (2, 1)))

        assert service.get_order(created.id).id == created.id

    def test_get_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.get_order(12345)


class TestCreditService:
    """Test suite for the credit balance query"""

    def test_balance_reflects_window(self, credit_service, order_repo, now):
        order_repo.add_order(1, "4500.00", now - timedelta(days=20))
        order_repo.add_order(1, "300.00", now - timedelta(days=40))
        order_repo.add_order(1, "200.00", now - timedelta(days=2), status=OrderStatus.REJECTED)

        balance = credit_service.get_balance(1)

        assert balance.credit_limit == Decimal("5000.00")
        assert balance.consumed_credit == Decimal("4500.00")
        assert balance.available_balance == Decimal("500.00")
        assert balance.window_days == 30
        assert balance.reference == now

    def test_balance_can_be_negative(self, customer_repo, order_repo, now):
        order_repo.add_order(2, "150.00", now - timedelta(days=1))
        credit_service = CreditService(customer_repo=customer_repo, order_repo=order_repo, clock=lambda: now)

        balance = credit_service.get_balance(2)

        assert balance.available_balance == Decimal("-150.00")

    def test_balance_query_is_read_only_and_repeatable(self, credit_service, order_repo, now):
        order_repo.add_order(1, "1200.00", now - timedelta(days=5))

        first = credit_service.get_balance(1)
        second = credit_service.get_balance(1)

        assert first == second
        assert len(order_repo.orders) == 1
        assert order_repo.create_calls == 0

    def test_balance_of_unknown_customer(self, credit_service):
        with pytest.raises(CustomerNotFound):
            credit_service.get_balance(404)

    def test_consumed_credit_without_orders_is_zero(self, credit_service):
        assert credit_service.consumed_credit(1) == Decimal("0")
