"""
Order Request Validation

Explicit checks that run before any customer or product lookup.
Returns a ValidationResult instead of raising, so callers decide what a
failure means; the order workflow turns it into InvalidRequest.

Upper bounds match the storage columns: quantity is INTEGER, money
columns are NUMERIC(15, 2).

Author: TM3
Date: 2025-10-17
"""
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from credit_orders.domain.order import OrderCreate

MAX_QUANTITY = 2**31 - 1
MAX_ORDER_VALUE = Decimal("9999999999999.99")


class ValidationResult(BaseModel):
    errors: List[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_order_request(request: OrderCreate) -> ValidationResult:
    """
    Validate an order creation request

    Rules:
        - customer_id must be positive
        - items must not be empty
        - every product_id must be positive
        - every quantity must be positive and at most MAX_QUANTITY
    """
    errors = []

    if request.customer_id <= 0:
        errors.append("customer_id must be positive")

    if not request.items:
        errors.append("items: order must have at least one item")

    for index, item in enumerate(request.items):
        if item.product_id <= 0:
            errors.append(f"items[{index}].product_id must be positive")
        if item.quantity <= 0:
            errors.append(f"items[{index}].quantity must be greater than zero")
        elif item.quantity > MAX_QUANTITY:
            errors.append(f"items[{index}].quantity must not exceed {MAX_QUANTITY}")

    return ValidationResult(errors=errors)


def validate_order_total(total_value: Decimal) -> ValidationResult:
    """Priced total must fit the order and item value columns"""
    if total_value > MAX_ORDER_VALUE:
        return ValidationResult(errors=[f"total_value must not exceed {MAX_ORDER_VALUE}"])
    return ValidationResult()
