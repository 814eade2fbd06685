"""Seat availability endpoints."""

from fastapi import APIRouter, Depends

from cineticket.api.dependencies import get_booking_service
from cineticket.api.errors import ERROR_RESPONSES, unwrap
from cineticket.schemas import SeatMapResponse, SeatResponse, SeatStatusResponse
from cineticket.services import BookingService

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/showtimes/{showtime_id}/seats", response_model=SeatMapResponse)
async def get_seat_map(
    showtime_id: int,
    booking: BookingService = Depends(get_booking_service),
) -> SeatMapResponse:
    """
    Get every seat of the showtime's room with its occupancy.

    Occupancy is a snapshot; a free seat can still be lost at purchase time.
    """
    entries = unwrap(await booking.seat_map(showtime_id))
    seats = [
        SeatResponse(
            id=entry.seat.id,
            row_label=entry.seat.row_label,
            number=entry.seat.number,
            category=entry.seat.category,
            occupied=entry.occupied,
        )
        for entry in entries
    ]
    return SeatMapResponse(
        showtime_id=showtime_id,
        seats=seats,
        total_seats=len(seats),
        occupied_seats=sum(1 for seat in seats if seat.occupied),
    )


@router.get("/showtimes/{showtime_id}/seats/{seat_id}", response_model=SeatStatusResponse)
async def get_seat_status(
    showtime_id: int,
    seat_id: int,
    booking: BookingService = Depends(get_booking_service),
) -> SeatStatusResponse:
    available = unwrap(await booking.is_available(showtime_id, seat_id))
    return SeatStatusResponse(showtime_id=showtime_id, seat_id=seat_id, available=available)
