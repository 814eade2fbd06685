"""Advisory seat availability queries."""

from dataclasses import dataclass

from cineticket.errors import ValidationError
from cineticket.models.seat import Seat
from cineticket.stores import BookingStores


@dataclass(frozen=True)
class SeatAvailability:
    seat: Seat
    occupied: bool


class AvailabilityChecker:
    """
    Read-only view over the seat ledger.

    Answers can be stale by the time a purchase commits; they are a fast path
    for the UI and the reservation builder, never a lock.
    """

    def __init__(self, stores: BookingStores) -> None:
        self.stores = stores

    async def occupied_seats(self, showtime_id: int) -> set[int]:
        tickets = await self.stores.seat_ledger.list_active_tickets_for_showtime(showtime_id)
        return {ticket.seat_id for ticket in tickets}

    async def is_available(self, showtime_id: int, seat_id: int) -> bool:
        return not await self.stores.seat_ledger.is_seat_active_for(showtime_id, seat_id)

    async def are_available(self, showtime_id: int, seat_ids: list[int]) -> bool:
        """True only if every seat in the selection is currently free."""
        if not seat_ids:
            raise ValidationError("At least one seat must be selected")
        for seat_id in seat_ids:
            if not await self.is_available(showtime_id, seat_id):
                return False
        return True

    async def seat_map(self, showtime_id: int) -> list[SeatAvailability]:
        """All active seats of the showtime's room flagged as occupied or free."""
        showtime = await self.stores.showtimes.get(showtime_id)
        if showtime is None:
            raise ValidationError(f"Showtime {showtime_id} not found")

        seats = await self.stores.seats.list_for_room(showtime.room_id)
        occupied = await self.occupied_seats(showtime_id)
        return [SeatAvailability(seat=seat, occupied=seat.id in occupied) for seat in seats]
