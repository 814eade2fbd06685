"""Pydantic schemas for purchases."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from cineticket.models.purchase import PaymentMethod, PurchaseStatus


class PurchaseRequest(BaseModel):
    """Seats and concessions to buy for one showtime."""

    showtime_id: int
    seat_ids: list[int]
    combos: dict[int, int] = Field(default_factory=dict)  # combo id -> quantity
    payment_method: PaymentMethod


class PurchaseResponse(BaseModel):
    """Purchase response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    purchased_at: datetime
    total_seats: Decimal
    total_concessions: Decimal
    total_general: Decimal
    payment_method: PaymentMethod
    status: PurchaseStatus
    cancelled_at: datetime | None = None
    receipt_location: str | None = None


class PurchaseConfirmationResponse(BaseModel):
    """Result of a committed purchase."""

    model_config = ConfigDict(from_attributes=True)

    purchase_id: int
    receipt_location: str | None = None
    receipt_warning: str | None = None  # set when the sale stands without a receipt


class ReceiptResponse(BaseModel):
    purchase_id: int
    receipt_location: str


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Body of every booking error response."""

    detail: ErrorDetail
