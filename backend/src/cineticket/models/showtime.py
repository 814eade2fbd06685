"""Showtime model: a scheduled screening in a room."""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, Integer
from sqlalchemy.orm import Mapped, mapped_column

from cineticket.models.base import Base, Money, TimestampMixin


class ShowtimeStatus(enum.Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"


class Showtime(Base, TimestampMixin):
    """
    Showtime model.

    Owned by catalog management; the booking core only reads it to check
    schedulability, the per-seat price and the start time.
    """

    __tablename__ = "showtimes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    movie_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    room_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    ends_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    seat_price: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    status: Mapped[ShowtimeStatus] = mapped_column(
        Enum(ShowtimeStatus, name="showtime_status"),
        default=ShowtimeStatus.SCHEDULED,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Showtime(id={self.id}, room_id={self.room_id}, "
            f"starts_at={self.starts_at}, status={self.status})>"
        )

    @property
    def accepts_reservations(self) -> bool:
        return self.status is ShowtimeStatus.SCHEDULED
