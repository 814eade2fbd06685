"""Seed script to populate a demo room, showtimes and concession menu."""

import asyncio
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import func, select

from cineticket.database import AsyncSessionLocal
from cineticket.models import Combo, Seat, SeatCategory, Showtime, ShowtimeStatus
from cineticket.utils.clock import utcnow

ROOM_ID = 1
ROWS = ["A", "B", "C"]
SEATS_PER_ROW = 10


def seat_category(row_label: str) -> SeatCategory:
    if row_label == ROWS[-1]:
        return SeatCategory.VIP
    if row_label == ROWS[-2]:
        return SeatCategory.PREFERENTIAL
    return SeatCategory.REGULAR


async def seed_demo_data() -> None:
    """Seed the database with one room, two showtimes and the combo menu."""
    combos_data = [
        {"name": "Small Popcorn", "category": "popcorn", "price": Decimal("9000")},
        {"name": "Medium Popcorn", "category": "popcorn", "price": Decimal("12000")},
        {"name": "Large Popcorn", "category": "popcorn", "price": Decimal("15000")},
        {"name": "Small Soda", "category": "drinks", "price": Decimal("6000")},
        {"name": "Large Soda", "category": "drinks", "price": Decimal("8000")},
        {"name": "Bottled Water", "category": "drinks", "price": Decimal("5000")},
        {"name": "Nachos", "category": "snacks", "price": Decimal("14000")},
        {"name": "Hot Dog", "category": "snacks", "price": Decimal("13000")},
        {"name": "Candy Bag", "category": "snacks", "price": Decimal("7000")},
        {
            "name": "Couple Combo",
            "category": "combos",
            "description": "Large popcorn, two large sodas",
            "price": Decimal("25000"),
        },
    ]

    async with AsyncSessionLocal() as session:
        existing = await session.scalar(select(func.count()).select_from(Showtime))
        if existing:
            print(f"{existing} showtimes already exist, skipping")
            return

        for row_label in ROWS:
            for number in range(1, SEATS_PER_ROW + 1):
                session.add(
                    Seat(
                        room_id=ROOM_ID,
                        row_label=row_label,
                        number=number,
                        category=seat_category(row_label),
                    )
                )
        print(f"Added {len(ROWS) * SEATS_PER_ROW} seats to room {ROOM_ID}")

        now = utcnow()
        for days_ahead, price in [(1, Decimal("15000")), (2, Decimal("18000"))]:
            starts_at = now + timedelta(days=days_ahead)
            session.add(
                Showtime(
                    movie_id=1,
                    room_id=ROOM_ID,
                    starts_at=starts_at,
                    ends_at=starts_at + timedelta(hours=2),
                    seat_price=price,
                    status=ShowtimeStatus.SCHEDULED,
                )
            )
            # Flush one at a time so ids follow the listed order
            await session.flush()
        print("Added 2 showtimes")

        for combo_data in combos_data:
            session.add(Combo(**combo_data))
            await session.flush()
        print(f"Added {len(combos_data)} combos")

        await session.commit()
        print("Demo data seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
