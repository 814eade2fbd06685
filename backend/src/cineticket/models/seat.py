"""Seat model: a physical seat in a room."""

import enum

from sqlalchemy import Enum, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cineticket.models.base import Base


class SeatCategory(enum.Enum):
    REGULAR = "REGULAR"
    PREFERENTIAL = "PREFERENTIAL"
    VIP = "VIP"


class Seat(Base):
    """Immutable reference data addressed by row label and number."""

    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint("room_id", "row_label", "number", name="uq_seat_room_position"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    room_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    row_label: Mapped[str] = mapped_column(String(5), nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[SeatCategory] = mapped_column(
        Enum(SeatCategory, name="seat_category"),
        default=SeatCategory.REGULAR,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Seat(id={self.id}, room_id={self.room_id}, position={self.label!r})>"

    @property
    def label(self) -> str:
        return f"{self.row_label}{self.number}"
