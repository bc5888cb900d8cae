"""
Customers API Endpoints
Customer lookups and real-time credit balance

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from credit_orders.api.dependencies import get_credit_service, get_customer_repository
from credit_orders.core.config import settings
from credit_orders.domain.errors import CustomerNotFound
from credit_orders.repositories.customer_repository import CustomerRepository
from credit_orders.services.credit_service import CreditService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def get_customers(
    search: Optional[str] = Query(None, description="Search by name"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    repo: CustomerRepository = Depends(get_customer_repository)
):
    """
    Get customers, ordered by name
    """
    try:
        customers, total = repo.find_all(search=search, limit=limit, offset=offset)

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(customers),
            "data": [customer.to_dict() for customer in customers]
        }

    except Exception:
        logger.exception("Error fetching customers")
        raise HTTPException(status_code=500, detail="Error fetching customers")


@router.get("/{customer_id}")
def get_customer(
    customer_id: int,
    repo: CustomerRepository = Depends(get_customer_repository)
):
    customer = repo.find_by_id(customer_id)
    if customer is None:
        raise CustomerNotFound(customer_id)

    return {
        "status": "success",
        "data": customer.to_dict()
    }


@router.get("/{customer_id}/credit")
def get_customer_credit(
    customer_id: int,
    service: CreditService = Depends(get_credit_service)
):
    """
    Get real-time credit balance information

    consumed_credit is the approved order total of the last
    CREDIT_WINDOW_DAYS days; available_balance = credit_limit - consumed_credit.
    """
    balance = service.get_balance(customer_id)

    return {
        "customer_id": balance.customer_id,
        "customer_name": balance.customer_name,
        "credit_limit": float(balance.credit_limit),
        "consumed_credit": float(balance.consumed_credit),
        "available_balance": float(balance.available_balance),
        "window_days": balance.window_days
    }
