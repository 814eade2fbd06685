"""Turns a seat selection into priced, unpersisted ticket drafts."""

import logging

from cineticket.errors import SeatUnavailableError, ValidationError
from cineticket.models.showtime import Showtime
from cineticket.services.drafts import SeatTicketDraft
from cineticket.stores import BookingStores

logger = logging.getLogger(__name__)

DEFAULT_MAX_SEATS = 5


class ReservationBuilder:
    """
    Validate a seat selection for a showtime.

    Checks run cheapest first:
    1. Selection size (1 to max_seats) and duplicates, before any lookup
    2. Showtime exists and is SCHEDULED
    3. Every seat exists, is active and belongs to the showtime's room
    4. Fast availability check per seat, in input order
    5. Price each seat at the showtime's seat price

    Nothing is persisted; the commit coordinator enforces the real invariant.
    """

    def __init__(self, stores: BookingStores, max_seats: int = DEFAULT_MAX_SEATS) -> None:
        self.stores = stores
        self.max_seats = max_seats

    async def build(self, showtime_id: int, seat_ids: list[int]) -> list[SeatTicketDraft]:
        """
        Build ticket drafts in the same order as ``seat_ids``.

        Raises:
            ValidationError: Bad selection, unknown or unschedulable showtime,
                seats outside the room, or no seat price configured.
            SeatUnavailableError: A seat already has an ACTIVE ticket.
        """
        self._check_selection(seat_ids)

        showtime = await self.stores.showtimes.get(showtime_id)
        if showtime is None:
            raise ValidationError(f"Showtime {showtime_id} not found")
        if not showtime.accepts_reservations:
            raise ValidationError(
                f"Showtime {showtime_id} does not accept reservations (status: {showtime.status.value})"
            )

        await self._check_seats_in_room(showtime, seat_ids)

        for seat_id in seat_ids:
            if await self.stores.seat_ledger.is_seat_active_for(showtime_id, seat_id):
                logger.info(f"Seat {seat_id} already taken for showtime {showtime_id}")
                raise SeatUnavailableError(seat_id)

        if showtime.seat_price is None:
            raise ValidationError(f"Showtime {showtime_id} has no seat price configured")

        return [
            SeatTicketDraft(showtime_id=showtime_id, seat_id=seat_id, unit_price=showtime.seat_price)
            for seat_id in seat_ids
        ]

    def _check_selection(self, seat_ids: list[int]) -> None:
        if not seat_ids:
            raise ValidationError("At least one seat must be selected")
        if len(seat_ids) > self.max_seats:
            raise ValidationError(f"A purchase can include at most {self.max_seats} seats")

        seen: set[int] = set()
        for seat_id in seat_ids:
            if seat_id in seen:
                raise ValidationError(f"Seat {seat_id} is selected more than once")
            seen.add(seat_id)

    async def _check_seats_in_room(self, showtime: Showtime, seat_ids: list[int]) -> None:
        seats = await self.stores.seats.get_many(seat_ids)
        for seat_id in seat_ids:
            seat = seats.get(seat_id)
            if seat is None or not seat.is_active or seat.room_id != showtime.room_id:
                raise ValidationError(f"Seat {seat_id} does not exist in room {showtime.room_id}")
