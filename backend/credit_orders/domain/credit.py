"""
Credit Domain Model

The approval rule and the read-only credit balance projection.

Author: TM3
Date: 2025-10-17
"""
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from credit_orders.domain.order import CreditSnapshot, OrderLine, OrderStatus


def window_start(reference: datetime, window_days: int) -> datetime:
    """Lower bound (inclusive) of the rolling window ending at reference"""
    return reference - timedelta(days=window_days)


def order_total(lines: List[OrderLine]) -> Decimal:
    return sum((line.subtotal for line in lines), Decimal('0'))


def decide_status(total_value: Decimal, available_balance: Decimal) -> OrderStatus:
    """Equal totals approve; a negative balance rejects any positive total."""
    if total_value <= available_balance:
        return OrderStatus.APPROVED
    return OrderStatus.REJECTED


def build_snapshot(
    credit_limit: Decimal,
    consumed_credit: Decimal,
    total_value: Decimal,
    status: OrderStatus
) -> CreditSnapshot:
    available_balance = credit_limit - consumed_credit
    remaining_balance = available_balance
    if status == OrderStatus.APPROVED:
        remaining_balance = available_balance - total_value

    return CreditSnapshot(
        credit_limit=credit_limit,
        consumed_credit=consumed_credit,
        available_balance=available_balance,
        remaining_balance=remaining_balance,
    )


class CreditBalance(BaseModel):
    """
    Credit balance of a customer at a reference instant

    Fields:
        customer_id: Customer ID
        customer_name: Customer name
        credit_limit: Customer credit limit
        consumed_credit: Approved order total within the rolling window
        available_balance: credit_limit - consumed_credit
        window_days: Rolling window length
        reference: Instant the window ends at
    """

    customer_id: int = Field(..., description="Customer ID")
    customer_name: str = Field(..., description="Customer name")
    credit_limit: Decimal = Field(..., description="Credit limit")
    consumed_credit: Decimal = Field(..., description="Approved total inside the window")
    available_balance: Decimal = Field(..., description="Credit limit minus consumed credit")
    window_days: int = Field(..., description="Rolling window length in days")
    reference: datetime = Field(..., description="End of the rolling window")

    def to_dict(self) -> dict:
        data = self.model_dump()
        for field in ['credit_limit', 'consumed_credit', 'available_balance']:
            data[field] = float(data[field])
        data['reference'] = self.reference.isoformat()
        return data
