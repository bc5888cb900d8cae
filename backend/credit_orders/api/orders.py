"""
Orders API Endpoints
Order creation with credit validation, and order queries

Handlers are plain functions: psycopg2 blocks, so FastAPI runs them in its
threadpool.

Author: TM3
Date: 2025-10-17
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from credit_orders.api.dependencies import get_order_repository, get_order_service
from credit_orders.core.config import settings
from credit_orders.domain.errors import OrderError
from credit_orders.domain.order import OrderCreate, OrderStatus
from credit_orders.repositories.order_repository import OrderRepository
from credit_orders.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(
    request: OrderCreate,
    service: OrderService = Depends(get_order_service)
):
    """
    Create an order and evaluate it against the customer's credit

    Returns 201 for both APPROVED and REJECTED orders; the body carries the
    status, frozen item prices and the credit figures used for the decision.
    """
    order = service.create_order(request)
    return order.to_dict()


@router.get("")
def get_orders(
    customer_id: Optional[int] = Query(None, description="Filter by customer"),
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="Filter by status (APPROVED, REJECTED)"),
    from_date: Optional[datetime] = Query(None, description="Orders placed from this instant (ISO format)"),
    to_date: Optional[datetime] = Query(None, description="Orders placed until this instant (ISO format)"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    repo: OrderRepository = Depends(get_order_repository)
):
    """
    Get orders with optional filters, newest first

    Returns orders with their items
    """
    try:
        orders, total = repo.find_all(
            customer_id=customer_id,
            status=order_status,
            from_date=from_date,
            to_date=to_date,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception:
        logger.exception("Error fetching orders")
        raise HTTPException(status_code=500, detail="Error fetching orders")


@router.get("/customers/{customer_id}/total")
def get_customer_total(
    customer_id: int,
    start: datetime = Query(..., description="Period start (ISO format, inclusive)"),
    end: datetime = Query(..., description="Period end (ISO format, inclusive)"),
    repo: OrderRepository = Depends(get_order_repository)
):
    """
    Get the approved order total of a customer over a period
    """
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")

    try:
        total = repo.total_by_customer_and_period(customer_id, start, end)

        return {
            "status": "success",
            "data": {
                "customer_id": customer_id,
                "start": start.isoformat(),
                "end": end.isoformat(),
                "total": float(total)
            }
        }

    except Exception:
        logger.exception(f"Error calculating total for customer {customer_id}")
        raise HTTPException(status_code=500, detail="Error calculating customer total")


@router.get("/{order_id}")
def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service)
):
    """
    Get a single order with its items
    """
    try:
        order = service.get_order(order_id)
        return {
            "status": "success",
            "data": order.to_dict()
        }

    except OrderError:
        raise
    except Exception:
        logger.exception(f"Error fetching order {order_id}")
        raise HTTPException(status_code=500, detail="Error fetching order")
