"""
Products API Endpoints
Product catalog queries

Author: TM3
Date: 2025-10-17
"""
import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from credit_orders.api.dependencies import get_product_repository
from credit_orders.core.config import settings
from credit_orders.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def get_products(
    search: Optional[str] = Query(None, description="Search by name"),
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum unit price"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum unit price"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    repo: ProductRepository = Depends(get_product_repository)
):
    """
    Get products with optional filters, ordered by name
    """
    try:
        products, total = repo.find_all(
            search=search,
            min_price=min_price,
            max_price=max_price,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception:
        logger.exception("Error fetching products")
        raise HTTPException(status_code=500, detail="Error fetching products")


@router.get("/{product_id}")
def get_product(
    product_id: int,
    repo: ProductRepository = Depends(get_product_repository)
):
    try:
        product = repo.find_by_id(product_id)
        if product is None:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except Exception:
        logger.exception(f"Error fetching product {product_id}")
        raise HTTPException(status_code=500, detail="Error fetching product")
