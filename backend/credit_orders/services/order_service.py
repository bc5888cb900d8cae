"""
Order Service
Order creation with credit limit validation

Steps of create_order:
1. Validate the request (before any lookup)
2. Resolve the customer
3. Resolve every referenced product in one query
4. Freeze unit prices and compute subtotals / total
5. Read consumed credit inside the rolling window
6. available = credit_limit - consumed
7. APPROVED if total <= available, else REJECTED
8. Insert order + items in one transaction
9. Return the order with the credit snapshot used for the decision

Steps 5-8 share one transaction, but at the default isolation level two
concurrent orders for the same customer can both read consumed credit
before either commits, and both be approved. settings.SERIALIZE_CREDIT_CHECKS
takes a per-customer advisory lock first to rule that out.

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Callable, ContextManager, Optional

import psycopg2

from credit_orders.core.config import settings
from credit_orders.core.database import transaction
from credit_orders.domain.credit import build_snapshot, decide_status, order_total
from credit_orders.domain.errors import (
    CustomerNotFound,
    InvalidRequest,
    OrderNotFound,
    PersistenceFailure,
    ProductNotFound,
)
from credit_orders.domain.order import Order, OrderCreate, OrderLine, OrderStatus
from credit_orders.domain.validation import validate_order_request, validate_order_total
from credit_orders.repositories.customer_repository import CustomerRepository
from credit_orders.repositories.order_repository import OrderRepository
from credit_orders.repositories.product_repository import ProductRepository
from credit_orders.services.credit_service import CreditService

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service for creating and reading orders

    Handles:
    - Request validation
    - Customer and product resolution
    - Price freezing and totals
    - Credit decision
    - Atomic persistence of the order graph
    """

    def __init__(
        self,
        customer_repo: Optional[CustomerRepository] = None,
        product_repo: Optional[ProductRepository] = None,
        order_repo: Optional[OrderRepository] = None,
        credit_service: Optional[CreditService] = None,
        transaction_factory: Callable[[], ContextManager] = transaction,
        serialize_credit_checks: Optional[bool] = None
    ):
        self.customer_repo = customer_repo or CustomerRepository()
        self.product_repo = product_repo or ProductRepository()
        self.order_repo = order_repo or OrderRepository()
        self.credit_service = credit_service or CreditService(
            customer_repo=self.customer_repo,
            order_repo=self.order_repo,
        )
        self.transaction_factory = transaction_factory
        if serialize_credit_checks is None:
            serialize_credit_checks = settings.SERIALIZE_CREDIT_CHECKS
        self.serialize_credit_checks = serialize_credit_checks

    def create_order(self, request: OrderCreate) -> Order:
        """
        Create an order and decide its status against the customer's credit

        A REJECTED order is a successful result: it is persisted and returned.

        Raises:
            InvalidRequest: empty item list, quantity or id out of range, total too large
            CustomerNotFound: customer does not exist
            ProductNotFound: one or more products do not exist (all missing ids)
            PersistenceFailure: the order graph could not be stored; nothing was written
        """
        validation = validate_order_request(request)
        if not validation.is_valid:
            logger.info(f"Rejected invalid order request: {validation.errors}")
            raise InvalidRequest(validation.errors)

        logger.info(f"Creating order for customer {request.customer_id}")

        # 1. Customer must exist
        customer = self.customer_repo.find_by_id(request.customer_id)
        if customer is None:
            raise CustomerNotFound(request.customer_id)

        # 2. All products in one query
        product_ids = list(dict.fromkeys(item.product_id for item in request.items))
        products = self.product_repo.find_by_ids(product_ids)
        missing = [pid for pid in product_ids if pid not in products]
        if missing:
            raise ProductNotFound(missing)

        # 3. Freeze prices, compute totals
        lines = [
            OrderLine.from_product(products[item.product_id], item.quantity)
            for item in request.items
        ]
        total_value = order_total(lines)

        total_check = validate_order_total(total_value)
        if not total_check.is_valid:
            raise InvalidRequest(total_check.errors)

        reference = self.credit_service.clock()

        try:
            with self.transaction_factory() as conn:
                if self.serialize_credit_checks:
                    self.order_repo.lock_customer_credit(conn, customer.id)

                # 4. Credit decision
                consumed = self.credit_service.consumed_credit(customer.id, reference, conn=conn)
                available = customer.credit_limit - consumed
                status = decide_status(total_value, available)

                # 5. Persist order + items
                order = self.order_repo.create(
                    conn,
                    customer_id=customer.id,
                    created_at=reference,
                    status=status,
                    total_value=total_value,
                    lines=lines,
                )

        except psycopg2.Error as e:
            logger.exception(f"Failed to persist order for customer {customer.id}")
            raise PersistenceFailure(f"Failed to persist order: {e}") from e

        order.customer_name = customer.name
        order.credit = build_snapshot(customer.credit_limit, consumed, total_value, status)

        if status == OrderStatus.REJECTED:
            logger.warning(
                f"Order {order.id} rejected: total {total_value} exceeds available balance {available} "
                f"for customer {customer.id}"
            )
        logger.info(f"Order {order.id} created with status {status.value}")

        return order

    def get_order(self, order_id: int) -> Order:
        """
        Raises:
            OrderNotFound: if the order does not exist
        """
        order = self.order_repo.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order
