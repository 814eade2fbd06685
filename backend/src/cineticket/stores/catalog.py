"""Read-only lookups into catalog data: showtimes, seats and concession combos."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cineticket.models.concession import Combo
from cineticket.models.seat import Seat
from cineticket.models.showtime import Showtime


class ShowtimeStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, showtime_id: int) -> Showtime | None:
        return await self.db.get(Showtime, showtime_id)


class SeatStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_many(self, seat_ids: Iterable[int]) -> dict[int, Seat]:
        """Seats keyed by id. Unknown ids are simply absent from the result."""
        query = select(Seat).where(Seat.id.in_(list(seat_ids)))
        result = await self.db.execute(query)
        return {seat.id: seat for seat in result.scalars().all()}

    async def list_for_room(self, room_id: int) -> list[Seat]:
        """Active seats of a room in row/number order."""
        query = (
            select(Seat)
            .where(Seat.room_id == room_id, Seat.is_active.is_(True))
            .order_by(Seat.row_label, Seat.number)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())


class ConcessionCatalog:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, combo_id: int) -> Combo | None:
        return await self.db.get(Combo, combo_id)

    async def list_available(self) -> list[Combo]:
        query = select(Combo).where(Combo.is_available.is_(True)).order_by(Combo.name)
        result = await self.db.execute(query)
        return list(result.scalars().all())
