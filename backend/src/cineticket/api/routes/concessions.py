"""Concession catalog endpoints."""

from fastapi import APIRouter, Depends

from cineticket.api.dependencies import get_booking_service
from cineticket.api.errors import ERROR_RESPONSES, unwrap
from cineticket.models.concession import Combo
from cineticket.schemas import ComboResponse
from cineticket.services import BookingService

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/combos", response_model=list[ComboResponse])
async def get_combos(booking: BookingService = Depends(get_booking_service)) -> list[Combo]:
    """Get combos currently available for sale."""
    return unwrap(await booking.available_combos())
