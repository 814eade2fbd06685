"""SeatTicket model: the seat ledger entry that prevents double selling."""

import enum
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from cineticket.models.base import Base, Money, TimestampMixin


class TicketStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    USED = "USED"


# Uniqueness only applies to ACTIVE rows so a cancelled seat can be sold again.
ACTIVE_ONLY = text("status = 'ACTIVE'")
ACTIVE_SEAT_INDEX = "uq_seat_tickets_active_seat"


class SeatTicket(Base, TimestampMixin):
    """
    Binds one seat to one purchase for one showtime.

    The partial unique index on (showtime_id, seat_id) is the authority for
    seat ownership: two purchases racing for the same seat cannot both insert
    an ACTIVE row.
    """

    __tablename__ = "seat_tickets"
    __table_args__ = (
        Index(
            ACTIVE_SEAT_INDEX,
            "showtime_id",
            "seat_id",
            unique=True,
            postgresql_where=ACTIVE_ONLY,
            sqlite_where=ACTIVE_ONLY,
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    purchase_id: Mapped[int] = mapped_column(
        ForeignKey("purchases.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    showtime_id: Mapped[int] = mapped_column(
        ForeignKey("showtimes.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    seat_id: Mapped[int] = mapped_column(
        ForeignKey("seats.id", ondelete="RESTRICT"),
        nullable=False,
    )
    unit_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[TicketStatus] = mapped_column(
        Enum(TicketStatus, name="ticket_status"),
        default=TicketStatus.ACTIVE,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<SeatTicket(id={self.id}, showtime_id={self.showtime_id}, "
            f"seat_id={self.seat_id}, status={self.status})>"
        )

    @property
    def is_active(self) -> bool:
        return self.status is TicketStatus.ACTIVE
