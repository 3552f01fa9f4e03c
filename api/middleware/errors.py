"""
Error envelope for the admin API.

Every error leaves as {"error": {code, message, details}, request_id, timestamp}.
The webhook never reaches these handlers for business failures; those are
answered in the chat instead.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from orderline.errors import OrderLineError
from orderline.models.common import FailureKind

logger = logging.getLogger("orderline.api")


class APIError(Exception):
    """An error raised by a router with its own code and status."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, code: str, message: str, details: Dict[str, Any] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} not found: {identifier}",
            {"resource": resource, "identifier": identifier},
        )


# Core failures that can surface from the inventory endpoints
FAILURE_STATUS = {
    FailureKind.ITEM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.INSUFFICIENT_STOCK: status.HTTP_409_CONFLICT,
    FailureKind.TRANSIENT_CONFLICT: status.HTTP_409_CONFLICT,
    FailureKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_envelope(request: Request, status_code: int, code: str, message: str,
                   details: Dict[str, Any] = None) -> JSONResponse:
    body = {
        "error": {"code": code, "message": message, "details": details or {}},
        "request_id": getattr(request.state, "request_id", "unknown"),
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }
    return JSONResponse(status_code=status_code, content=body)


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    logger.warning(f"{exc.code}: {exc.message}")
    return error_envelope(request, exc.status_code, exc.code, exc.message, exc.details)


async def handle_order_error(request: Request, exc: OrderLineError) -> JSONResponse:
    code = exc.kind.value.upper()
    logger.warning(f"{code}: {exc.message}")
    status_code = FAILURE_STATUS.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return error_envelope(request, status_code, code, exc.message, exc.details)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten pydantic's error list into field/message pairs."""
    problems = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(f"Rejected request body: {problems}")
    return error_envelope(
        request,
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Request validation failed",
        {"errors": problems},
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return error_envelope(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred",
        {"type": type(exc).__name__},
    )


def setup_exception_handlers(app: FastAPI):
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(OrderLineError, handle_order_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected)
