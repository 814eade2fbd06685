"""Translation of booking results and errors into HTTP responses."""

import logging
from typing import Any, TypeVar

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from cineticket.errors import BookingError, ErrorCode, StorageError
from cineticket.schemas import ErrorDetail, ErrorResponse
from cineticket.services import Err, Ok

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.AUTHENTICATION: 401,
    ErrorCode.SEAT_UNAVAILABLE: 409,
    ErrorCode.RECEIPT_GENERATION: 502,
}

# OpenAPI documentation for the booking routers
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    503: {"model": ErrorResponse, "description": "Storage unavailable"},
}
PURCHASE_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    **ERROR_RESPONSES,
    401: {"model": ErrorResponse, "description": "No acting user"},
    409: {"model": ErrorResponse, "description": "Seat already taken"},
    502: {"model": ErrorResponse, "description": "Receipt could not be generated"},
}


def error_detail(error: BookingError) -> dict[str, str]:
    return ErrorDetail(code=error.code.value, message=error.message).model_dump()


def unwrap(result: Ok[T] | Err) -> T:
    """Return the value of an Ok result or raise the matching HTTPException."""
    if isinstance(result, Ok):
        return result.value
    error = result.error
    raise HTTPException(status_code=STATUS_CODES.get(error.code, 400), detail=error_detail(error))


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    body = ErrorResponse(detail=ErrorDetail(code=exc.code.value, message=exc.message))
    return JSONResponse(status_code=503, content=body.model_dump())
