"""Pydantic schemas for seat availability."""

from pydantic import BaseModel, ConfigDict

from cineticket.models.seat import SeatCategory


class SeatResponse(BaseModel):
    """Seat as shown on a seat map."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    row_label: str
    number: int
    category: SeatCategory
    occupied: bool = False


class SeatMapResponse(BaseModel):
    """All seats of a showtime's room with their occupancy."""

    showtime_id: int
    seats: list[SeatResponse]
    total_seats: int
    occupied_seats: int


class SeatStatusResponse(BaseModel):
    """Availability of a single seat."""

    showtime_id: int
    seat_id: int
    available: bool
