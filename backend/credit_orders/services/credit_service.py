"""
Credit Service
Credit ledger query and credit balance projection

Consumed credit = sum of a customer's APPROVED orders placed within the
last CREDIT_WINDOW_DAYS days (lower bound inclusive). Both operations are
pure reads and take no locks, so a balance read may or may not see orders
being created concurrently.

Author: TM3
Date: 2025-10-17
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Optional

from credit_orders.core.config import settings
from credit_orders.domain.credit import CreditBalance, window_start
from credit_orders.domain.errors import CustomerNotFound
from credit_orders.repositories.customer_repository import CustomerRepository
from credit_orders.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CreditService:
    """
    Service for customer credit queries

    Handles:
    - Consumed credit inside the rolling window (credit ledger query)
    - Credit balance (limit, consumed, available) for display
    """

    def __init__(
        self,
        customer_repo: Optional[CustomerRepository] = None,
        order_repo: Optional[OrderRepository] = None,
        window_days: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.customer_repo = customer_repo or CustomerRepository()
        self.order_repo = order_repo or OrderRepository()
        self.window_days = window_days if window_days is not None else settings.CREDIT_WINDOW_DAYS
        self.clock = clock

    def consumed_credit(
        self,
        customer_id: int,
        reference: Optional[datetime] = None,
        conn=None
    ) -> Decimal:
        """
        Sum of the customer's approved orders inside the window ending at reference

        Args:
            customer_id: Customer ID
            reference: End of the window (default: now)
            conn: Optional connection of an open transaction

        Returns:
            Consumed credit, Decimal('0') when there are no qualifying orders
        """
        reference = reference or self.clock()
        since = window_start(reference, self.window_days)
        return self.order_repo.sum_approved_since(customer_id, since, conn=conn)

    def get_balance(self, customer_id: int, reference: Optional[datetime] = None) -> CreditBalance:
        """
        Credit balance of a customer

        Raises:
            CustomerNotFound: if the customer does not exist
        """
        customer = self.customer_repo.find_by_id(customer_id)
        if customer is None:
            raise CustomerNotFound(customer_id)

        reference = reference or self.clock()
        consumed = self.consumed_credit(customer.id, reference)

        logger.debug(f"Credit balance for customer {customer.id}: limit={customer.credit_limit} consumed={consumed}")

        return CreditBalance(
            customer_id=customer.id,
            customer_name=customer.name,
            credit_limit=customer.credit_limit,
            consumed_credit=consumed,
            available_balance=customer.credit_limit - consumed,
            window_days=self.window_days,
            reference=reference,
        )
