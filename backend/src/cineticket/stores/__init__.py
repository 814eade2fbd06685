"""Storage collaborators (repository pattern).

Each store wraps one AsyncSession; transaction boundaries belong to the
services that open the session.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from cineticket.stores.catalog import ConcessionCatalog, SeatStore, ShowtimeStore
from cineticket.stores.purchases import LineItemStore, PurchaseStore
from cineticket.stores.seat_ledger import SeatLedger, UniquenessViolation


class BookingStores:
    """All stores bound to the same session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.showtimes = ShowtimeStore(db)
        self.seats = SeatStore(db)
        self.seat_ledger = SeatLedger(db)
        self.purchases = PurchaseStore(db)
        self.line_items = LineItemStore(db)
        self.concessions = ConcessionCatalog(db)


__all__ = [
    "BookingStores",
    "ConcessionCatalog",
    "LineItemStore",
    "PurchaseStore",
    "SeatLedger",
    "SeatStore",
    "ShowtimeStore",
    "UniquenessViolation",
]
