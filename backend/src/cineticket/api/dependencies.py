"""FastAPI dependencies for the booking routes."""

from functools import lru_cache

from fastapi import Header

from cineticket.config import settings
from cineticket.database import AsyncSessionLocal
from cineticket.services import BookingService, RequestContext, TextReceiptGenerator


@lru_cache
def get_booking_service() -> BookingService:
    """
    Dependency for FastAPI to provide the booking facade.

    Usage:
        @router.get("/endpoint")
        async def endpoint(booking: BookingService = Depends(get_booking_service)):
            result = await booking.available_combos()
    """
    receipts = TextReceiptGenerator(settings.receipt_output_dir, settings.receipt_filename_prefix)
    return BookingService(AsyncSessionLocal, receipts, config=settings)


async def get_request_context(
    x_user_id: int | None = Header(default=None, description="Id of the acting user"),
) -> RequestContext | None:
    """Build the request context from the X-User-Id header, if present."""
    if x_user_id is None:
        return None
    return RequestContext(user_id=x_user_id)
