"""
Order Domain Errors

Tagged error types raised by the order workflow and read queries.
Each error carries a stable `code`; the HTTP layer maps codes to status
codes (see credit_orders.api.errors), the core never does.

Author: TM3
Date: 2025-10-17
"""
from typing import Any, Iterable, List, Optional


class OrderError(Exception):
    """Base class for every error the order core reports to callers"""

    code: str = "order_error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            'error': self.code,
            'message': self.message,
            'details': self.details,
        }


class InvalidRequest(OrderError):
    """Request failed validation before any lookup was made"""

    code = "invalid_request"

    def __init__(self, errors: List[str]):
        super().__init__("Invalid order request: " + "; ".join(errors), details=errors)
        self.errors = errors


class CustomerNotFound(OrderError):
    code = "customer_not_found"

    def __init__(self, customer_id: int):
        super().__init__(f"Customer not found: {customer_id}", details={'customer_id': customer_id})
        self.customer_id = customer_id


class ProductNotFound(OrderError):
    """One or more referenced products are missing from the catalog"""

    code = "product_not_found"

    def __init__(self, product_ids: Iterable[int]):
        self.product_ids = sorted(set(product_ids))
        ids = ", ".join(str(pid) for pid in self.product_ids)
        super().__init__(f"Products not found: {ids}", details={'product_ids': self.product_ids})


class OrderNotFound(OrderError):
    code = "order_not_found"

    def __init__(self, order_id: int):
        super().__init__(f"Order not found: {order_id}", details={'order_id': order_id})
        self.order_id = order_id


class PersistenceFailure(OrderError):
    """Writing the order graph failed; nothing was stored"""

    code = "persistence_failure"
