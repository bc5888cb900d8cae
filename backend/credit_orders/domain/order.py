"""
Order Domain Models

Represents order-related entities. An order and its items are created
together, once, and never mutated afterwards: the status decided at
creation is final.

Relationships are plain foreign-key ids (customer_id, order_id,
product_id); there are no back-reference collections.

Author: TM3
Date: 2025-10-17
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from credit_orders.domain.product import Product


class OrderStatus(str, Enum):
    """
    Credit decision for an order. Assigned once at creation, terminal.

    APPROVED: total fits within the customer's available balance
    REJECTED: total exceeds the available balance (order is still stored)
    """

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def description(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_string(cls, value: str) -> "OrderStatus":
        """Parse a status name or description, case-insensitive"""
        for status in cls:
            if value.upper() == status.value:
                return status
        raise ValueError(f"Invalid order status: {value}")


class OrderItemCreate(BaseModel):
    """One requested line: product and quantity"""
    product_id: int
    quantity: int


class OrderCreate(BaseModel):
    """
    Schema for creating a new order

    Deliberately unconstrained beyond types: business validation runs in
    credit_orders.domain.validation so it can report every problem at once.
    """
    customer_id: int
    items: List[OrderItemCreate] = Field(default_factory=list)


class OrderLine(BaseModel):
    """
    A priced line, ready to persist

    unit_price is frozen from the product at the moment of pricing.
    """

    product_id: int
    product_name: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal
    subtotal: Decimal

    @classmethod
    def from_product(cls, product: Product, quantity: int) -> "OrderLine":
        return cls(
            product_id=product.id,
            product_name=product.name,
            quantity=quantity,
            unit_price=product.unit_price,
            subtotal=product.unit_price * quantity,
        )


class OrderItem(BaseModel):
    """
    Order Item domain model - a persisted line of an order

    Fields:
        id: Internal order item ID
        order_id: Parent order ID
        product_id: Reference to product catalog
        product_name: Product name (from catalog JOIN, optional)
        quantity: Number of units ordered
        unit_price: Price per unit frozen at order time
        subtotal: unit_price * quantity
    """

    id: int = Field(..., description="Order item ID")
    order_id: int = Field(..., description="Parent order ID")
    product_id: int = Field(..., description="Product catalog ID")
    product_name: Optional[str] = Field(None, description="Product name")
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    unit_price: Decimal = Field(..., description="Unit price snapshot", ge=0)
    subtotal: Decimal = Field(..., description="unit_price * quantity", ge=0)

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        for field in ['unit_price', 'subtotal']:
            data[field] = float(data[field])
        return data


class CreditSnapshot(BaseModel):
    """
    Credit figures used for an order's decision

    Fields:
        credit_limit: Customer credit limit at decision time
        consumed_credit: Approved total inside the window, before this order
        available_balance: credit_limit - consumed_credit (may be negative)
        remaining_balance: Balance left once this order's decision is applied
    """

    credit_limit: Decimal
    consumed_credit: Decimal
    available_balance: Decimal
    remaining_balance: Decimal

    def to_dict(self) -> dict:
        return {field: float(value) for field, value in self.model_dump().items()}


class Order(BaseModel):
    """
    Order domain model - a customer order with its items

    Fields:
        id: Internal order ID (primary key)
        customer_id: Reference to customer
        customer_name: Customer name (from JOIN, optional)
        created_at: When the order was placed (UTC)
        status: APPROVED or REJECTED
        total_value: Sum of item subtotals
        items: Order items
        credit: Credit snapshot, only set on the response of order creation
    """

    id: int = Field(..., description="Internal order ID")
    customer_id: int = Field(..., description="Customer ID")
    customer_name: Optional[str] = Field(None, description="Customer name (from JOIN)")
    created_at: datetime = Field(..., description="Creation timestamp")
    status: OrderStatus = Field(..., description="Credit decision")
    total_value: Decimal = Field(..., description="Total order value", ge=0)
    items: List[OrderItem] = Field(default_factory=list, description="Order items")
    credit: Optional[CreditSnapshot] = Field(None, description="Credit snapshot used for the decision")

    model_config = ConfigDict(from_attributes=True)

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_approved(self) -> bool:
        return self.status == OrderStatus.APPROVED

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Credit snapshot fields are flattened into the top level when present.
        """
        data = self.model_dump(exclude={'items', 'credit'})

        data['status'] = self.status.value
        data['total_value'] = float(self.total_value)
        data['created_at'] = self.created_at.isoformat()
        data['item_count'] = self.item_count
        data['total_quantity'] = self.total_quantity
        data['items'] = [item.to_dict() for item in self.items]

        if self.credit is not None:
            data.update(self.credit.to_dict())

        return data
