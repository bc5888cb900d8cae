"""
Error -> HTTP mapping

The only place that knows which status code an order error becomes.
Every error body has the same shape:

    {"status": "error", "error": code, "message": ..., "details": ...,
     "path": ..., "timestamp": ...}

Author: TM3
Date: 2025-10-17
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import psycopg2
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from credit_orders.domain.errors import (
    CustomerNotFound,
    InvalidRequest,
    OrderError,
    OrderNotFound,
    PersistenceFailure,
    ProductNotFound,
)

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    InvalidRequest.code: status.HTTP_400_BAD_REQUEST,
    CustomerNotFound.code: status.HTTP_404_NOT_FOUND,
    ProductNotFound.code: status.HTTP_404_NOT_FOUND,
    OrderNotFound.code: status.HTTP_404_NOT_FOUND,
    PersistenceFailure.code: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[Any] = None
) -> JSONResponse:
    body = {
        "status": "error",
        "error": code,
        "message": message,
        "details": details,
        "path": request.url.path,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def handle_order_error(request: Request, exc: OrderError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        # Internal details stay in the logs
        return error_response(request, status_code, exc.code, "Internal server error")

    logger.info(f"{exc.code} on {request.url.path}: {exc.message}")
    return error_response(request, status_code, exc.code, exc.message, exc.details)


async def handle_database_error(request: Request, exc: psycopg2.Error) -> JSONResponse:
    """Database failures outside the order write (lookups, balance reads)"""
    logger.error(f"Database error on {request.url.path}: {exc}")
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        PersistenceFailure.code,
        "Internal server error",
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.info(f"Request validation failed on {request.url.path}: {details}")
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        InvalidRequest.code,
        "Invalid request data",
        details,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OrderError, handle_order_error)
    app.add_exception_handler(psycopg2.Error, handle_database_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
