"""Shared test fixtures."""

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cineticket.api.errors import storage_error_handler
from cineticket.api.routes import concessions, health, purchases, showtimes
from cineticket.config import Settings
from cineticket.database import create_session_factory
from cineticket.errors import StorageError
from cineticket.models import Base, Combo, Seat, SeatCategory, Showtime, ShowtimeStatus
from cineticket.services import BookingService, TextReceiptGenerator

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
ROOM_ID = 1
OTHER_ROOM_ID = 2


class FakeClock:
    """Settable clock; call it to read the current time."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def test_app() -> FastAPI:
    """Minimal FastAPI app with the booking routers, for API tests."""
    app = FastAPI()
    app.include_router(health.router)
    app.include_router(showtimes.router, prefix="/api")
    app.include_router(concessions.router, prefix="/api")
    app.include_router(purchases.router, prefix="/api")
    app.add_exception_handler(StorageError, storage_error_handler)
    return app


# ---------------------------------------------------------------------------
# Database-backed fixtures (SQLite file, real partial unique index)
# ---------------------------------------------------------------------------


@pytest.fixture
async def session_factory(tmp_path: Path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'booking.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield create_session_factory(engine)
    await engine.dispose()


async def seed_booking_data(factory: async_sessionmaker[AsyncSession]) -> None:
    """
    Seed one room of ten seats (ids 1-10, row A) plus seat 11 in another room.

    Showtimes:
        1: 15000, starts in one day
        2: 18000, starts in one day
        3: CANCELLED
        4: no seat price
    Combos: 10 at 25000 (available), 11 at 9000 (not available).
    """
    async with factory() as db:
        for number in range(1, 11):
            db.add(Seat(id=number, room_id=ROOM_ID, row_label="A", number=number, category=SeatCategory.REGULAR))
        db.add(Seat(id=11, room_id=OTHER_ROOM_ID, row_label="A", number=1, category=SeatCategory.VIP))

        starts_at = NOW + timedelta(days=1)
        showtimes = [
            (1, Decimal("15000"), ShowtimeStatus.SCHEDULED),
            (2, Decimal("18000"), ShowtimeStatus.SCHEDULED),
            (3, Decimal("18000"), ShowtimeStatus.CANCELLED),
            (4, None, ShowtimeStatus.SCHEDULED),
        ]
        for showtime_id, price, status in showtimes:
            db.add(
                Showtime(
                    id=showtime_id,
                    movie_id=1,
                    room_id=ROOM_ID,
                    starts_at=starts_at,
                    ends_at=starts_at + timedelta(hours=2),
                    seat_price=price,
                    status=status,
                )
            )

        db.add(Combo(id=10, name="Couple Combo", category="combos", price=Decimal("25000")))
        db.add(Combo(id=11, name="Nachos", category="snacks", price=Decimal("9000"), is_available=False))
        await db.commit()


@pytest.fixture
async def seeded_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> async_sessionmaker[AsyncSession]:
    await seed_booking_data(session_factory)
    return session_factory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def booking_settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite://",
        max_seats_per_purchase=5,
        cancellation_cutoff_minutes=0,
        receipt_output_dir=tmp_path / "receipts",
    )


@pytest.fixture
def booking(
    seeded_factory: async_sessionmaker[AsyncSession],
    booking_settings: Settings,
    clock: FakeClock,
) -> BookingService:
    receipts = TextReceiptGenerator(booking_settings.receipt_output_dir)
    return BookingService(seeded_factory, receipts, config=booking_settings, clock=clock)
