"""Purchase endpoints: buy, list, cancel and regenerate receipts."""

import logging

from fastapi import APIRouter, Depends, status

from cineticket.api.dependencies import get_booking_service, get_request_context
from cineticket.api.errors import PURCHASE_ERROR_RESPONSES, unwrap
from cineticket.models.purchase import Purchase
from cineticket.schemas import (
    PurchaseConfirmationResponse,
    PurchaseRequest,
    PurchaseResponse,
    ReceiptResponse,
)
from cineticket.services import BookingService, RequestContext

logger = logging.getLogger(__name__)
router = APIRouter(responses=PURCHASE_ERROR_RESPONSES)


@router.post(
    "/purchases",
    response_model=PurchaseConfirmationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_purchase(
    request: PurchaseRequest,
    ctx: RequestContext | None = Depends(get_request_context),
    booking: BookingService = Depends(get_booking_service),
) -> PurchaseConfirmationResponse:
    """
    Buy seats and concessions for one showtime.

    A purchase whose receipt failed is still created; the response carries a
    receipt_warning and the receipt can be retried later.
    """
    result = await booking.purchase(
        ctx,
        request.showtime_id,
        request.seat_ids,
        request.combos,
        request.payment_method,
    )
    confirmation = unwrap(result)
    warning = confirmation.receipt_warning
    return PurchaseConfirmationResponse(
        purchase_id=confirmation.purchase_id,
        receipt_location=confirmation.receipt_location,
        receipt_warning=warning.message if warning else None,
    )


@router.get("/purchases", response_model=list[PurchaseResponse])
async def list_purchases(
    ctx: RequestContext | None = Depends(get_request_context),
    booking: BookingService = Depends(get_booking_service),
) -> list[Purchase]:
    """Purchase history of the acting user, newest first."""
    return unwrap(await booking.list_purchases(ctx))


@router.post("/purchases/{purchase_id}/cancel", response_model=PurchaseResponse)
async def cancel_purchase(
    purchase_id: int,
    booking: BookingService = Depends(get_booking_service),
) -> Purchase:
    """Cancel a purchase and release its seats."""
    return unwrap(await booking.cancel_purchase(purchase_id))


@router.post("/purchases/{purchase_id}/receipt", response_model=ReceiptResponse)
async def regenerate_receipt(
    purchase_id: int,
    booking: BookingService = Depends(get_booking_service),
) -> ReceiptResponse:
    """Generate the receipt again, replacing the stored location."""
    location = unwrap(await booking.generate_receipt(purchase_id))
    return ReceiptResponse(purchase_id=purchase_id, receipt_location=location)
