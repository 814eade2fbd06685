"""Seat ledger: the authoritative record of which seats are taken."""

import logging

from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cineticket.models.seat_ticket import ACTIVE_SEAT_INDEX, SeatTicket, TicketStatus

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"


class UniquenessViolation(Exception):
    """An ACTIVE ticket already exists for the (showtime, seat) pair."""

    def __init__(self, showtime_id: int, seat_id: int) -> None:
        super().__init__(f"Seat {seat_id} already has an active ticket for showtime {showtime_id}")
        self.showtime_id = showtime_id
        self.seat_id = seat_id


def is_unique_violation(error: IntegrityError) -> bool:
    """
    Tell a uniqueness violation apart from other integrity failures.

    PostgreSQL drivers expose the SQLSTATE; SQLite only reports it in the
    message text.
    """
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    message = str(orig).lower()
    return "unique" in message or ACTIVE_SEAT_INDEX in message


class SeatLedger:
    """Reads and writes seat tickets within the caller's session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_active_tickets_for_showtime(self, showtime_id: int) -> list[SeatTicket]:
        query = (
            select(SeatTicket)
            .where(
                SeatTicket.showtime_id == showtime_id,
                SeatTicket.status == TicketStatus.ACTIVE,
            )
            .order_by(SeatTicket.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def is_seat_active_for(self, showtime_id: int, seat_id: int) -> bool:
        """True when the seat currently has an ACTIVE ticket for the showtime."""
        query = select(
            exists().where(
                SeatTicket.showtime_id == showtime_id,
                SeatTicket.seat_id == seat_id,
                SeatTicket.status == TicketStatus.ACTIVE,
            )
        )
        result = await self.db.execute(query)
        return bool(result.scalar())

    async def insert_ticket(self, ticket: SeatTicket) -> int:
        """
        Persist one ticket and return its id.

        Raises:
            UniquenessViolation: The seat is already actively ticketed. The
                session transaction is no longer usable and must be rolled back.
        """
        self.db.add(ticket)
        try:
            await self.db.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise UniquenessViolation(ticket.showtime_id, ticket.seat_id) from e
            raise
        return ticket.id

    async def list_for_purchase(self, purchase_id: int) -> list[SeatTicket]:
        query = select(SeatTicket).where(SeatTicket.purchase_id == purchase_id).order_by(SeatTicket.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def bulk_cancel_for_purchase(self, purchase_id: int) -> int:
        """Cancel every ACTIVE ticket of a purchase. Zero matching rows is not an error."""
        stmt = (
            update(SeatTicket)
            .where(
                SeatTicket.purchase_id == purchase_id,
                SeatTicket.status == TicketStatus.ACTIVE,
            )
            .values(status=TicketStatus.CANCELLED)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        logger.debug(f"Cancelled {result.rowcount} tickets for purchase {purchase_id}")
        return result.rowcount
