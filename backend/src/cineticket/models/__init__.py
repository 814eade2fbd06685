"""SQLAlchemy ORM models."""

from cineticket.models.base import Base
from cineticket.models.concession import Combo, ConcessionLineItem
from cineticket.models.purchase import PaymentMethod, Purchase, PurchaseStatus
from cineticket.models.seat import Seat, SeatCategory
from cineticket.models.seat_ticket import SeatTicket, TicketStatus
from cineticket.models.showtime import Showtime, ShowtimeStatus

__all__ = [
    "Base",
    "Combo",
    "ConcessionLineItem",
    "PaymentMethod",
    "Purchase",
    "PurchaseStatus",
    "Seat",
    "SeatCategory",
    "SeatTicket",
    "Showtime",
    "ShowtimeStatus",
    "TicketStatus",
]
