"""Pydantic schemas for API requests and responses."""

from cineticket.schemas.concession import ComboResponse
from cineticket.schemas.purchase import (
    ErrorDetail,
    ErrorResponse,
    PurchaseConfirmationResponse,
    PurchaseRequest,
    PurchaseResponse,
    ReceiptResponse,
)
from cineticket.schemas.seat import SeatMapResponse, SeatResponse, SeatStatusResponse

__all__ = [
    "ComboResponse",
    "ErrorDetail",
    "ErrorResponse",
    "PurchaseConfirmationResponse",
    "PurchaseRequest",
    "PurchaseResponse",
    "ReceiptResponse",
    "SeatMapResponse",
    "SeatResponse",
    "SeatStatusResponse",
]
