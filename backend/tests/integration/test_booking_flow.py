"""End-to-end booking tests against a real SQLite database.

The partial unique index on active seat tickets is created from the ORM
metadata, so lost races, rollbacks and resale are exercised for real.
"""

from collections.abc import Mapping, Sequence
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock, patch

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cineticket.config import Settings
from cineticket.errors import (
    AuthenticationError,
    SeatUnavailableError,
    ValidationError,
)
from cineticket.models import (
    ConcessionLineItem,
    PaymentMethod,
    Purchase,
    PurchaseStatus,
    SeatTicket,
    TicketStatus,
)
from cineticket.services import (
    BookingService,
    Err,
    Ok,
    ReceiptGenerator,
    RequestContext,
    TextReceiptGenerator,
)
from cineticket.services.drafts import PreparedPurchase
from cineticket.stores import BookingStores, PurchaseStore

from conftest import NOW, FakeClock

ALICE = RequestContext(user_id=1)
BOB = RequestContext(user_id=2)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class FlakyReceiptGenerator(ReceiptGenerator):
    """Fails until ``healthy`` is set, then delegates to a text generator."""

    def __init__(self, output_dir: Path) -> None:
        self.healthy = False
        self.delegate = TextReceiptGenerator(output_dir)

    async def generate(
        self,
        purchase: Purchase,
        tickets: Sequence[SeatTicket],
        line_items: Sequence[ConcessionLineItem],
        extra: Mapping[str, str],
    ) -> str:
        if not self.healthy:
            raise OSError("printer on fire")
        return await self.delegate.generate(purchase, tickets, line_items, extra)


async def count_rows(factory: async_sessionmaker[AsyncSession], model: type) -> int:
    async with factory() as db:
        return await db.scalar(select(func.count()).select_from(model))


async def get_purchase(factory: async_sessionmaker[AsyncSession], purchase_id: int) -> Purchase:
    async with factory() as db:
        purchase = await db.get(Purchase, purchase_id)
        assert purchase is not None
        return purchase


async def buy(booking: BookingService, ctx: RequestContext, seat_ids: list[int], combos: dict | None = None):
    return await booking.purchase(ctx, 2, seat_ids, combos or {}, PaymentMethod.CREDIT_CARD)


# ---------------------------------------------------------------------------
# Purchasing
# ---------------------------------------------------------------------------


async def test_purchase_with_concessions_computes_totals(
    booking: BookingService,
    seeded_factory: async_sessionmaker[AsyncSession],
) -> None:
    result = await buy(booking, ALICE, [7, 8], {10: 2})

    assert isinstance(result, Ok)
    confirmation = result.value
    assert confirmation.receipt_warning is None
    assert Path(confirmation.receipt_location).is_file()

    purchase = await get_purchase(seeded_factory, confirmation.purchase_id)
    assert purchase.status is PurchaseStatus.CONFIRMED
    assert purchase.user_id == ALICE.user_id
    assert purchase.total_seats == Decimal("36000")
    assert purchase.total_concessions == Decimal("50000")
    assert purchase.total_general == Decimal("86000")
    assert purchase.receipt_location == confirmation.receipt_location

    async with seeded_factory() as db:
        stores = BookingStores(db)
        tickets = await stores.seat_ledger.list_for_purchase(purchase.id)
        line_items = await stores.line_items.list_for_purchase(purchase.id)
    assert [t.seat_id for t in tickets] == [7, 8]
    assert all(t.status is TicketStatus.ACTIVE for t in tickets)
    assert all(t.unit_price == Decimal("18000") for t in tickets)
    assert len(line_items) == 1
    assert line_items[0].quantity == 2
    assert line_items[0].subtotal == Decimal("50000")

    occupied = await booking.occupied_seats(2)
    assert occupied == Ok({7, 8})


async def test_purchase_without_concessions(booking: BookingService) -> None:
    result = await buy(booking, ALICE, [1])

    assert isinstance(result, Ok)
    purchases = (await booking.list_purchases(ALICE)).value
    assert purchases[0].total_concessions == Decimal("0")
    assert purchases[0].total_general == Decimal("18000")


async def test_taken_seat_is_rejected_before_commit(
    booking: BookingService,
    seeded_factory: async_sessionmaker[AsyncSession],
) -> None:
    assert isinstance(await buy(booking, ALICE, [7, 8]), Ok)

    result = await buy(booking, BOB, [6, 8])

    assert isinstance(result, Err)
    assert isinstance(result.error, SeatUnavailableError)
    assert result.error.seat_id == 8
    assert await count_rows(seeded_factory, Purchase) == 1


async def test_same_seat_on_other_showtime_is_free(booking: BookingService) -> None:
    assert isinstance(await buy(booking, ALICE, [7]), Ok)

    result = await booking.purchase(BOB, 1, [7], {}, PaymentMethod.CASH)

    assert isinstance(result, Ok)


async def test_lost_race_rolls_back_whole_purchase(
    booking: BookingService,
    seeded_factory: async_sessionmaker[AsyncSession],
) -> None:
    # Both buyers pass the fast check before either commits
    alice = (await booking.prepare_purchase(ALICE, 2, [7, 8], {}, PaymentMethod.CREDIT_CARD)).value
    bob = (await booking.prepare_purchase(BOB, 2, [9, 8], {10: 1}, PaymentMethod.DEBIT_CARD)).value

    assert isinstance(await booking.commit_purchase(alice), Ok)
    result = await booking.commit_purchase(bob)

    assert isinstance(result, Err)
    assert isinstance(result.error, SeatUnavailableError)
    assert result.error.seat_id == 8

    assert await count_rows(seeded_factory, Purchase) == 1
    assert await count_rows(seeded_factory, SeatTicket) == 2
    assert await count_rows(seeded_factory, ConcessionLineItem) == 0
    assert (await booking.list_purchases(BOB)).value == []
    assert await booking.is_available(2, 9) == Ok(True)


async def test_commit_rejects_purchase_without_seats(booking: BookingService) -> None:
    prepared = PreparedPurchase.build(
        user_id=1,
        showtime_id=2,
        payment_method=PaymentMethod.CASH,
        purchased_at=NOW,
        seat_tickets=[],
        line_items=[],
    )

    result = await booking.commit_purchase(prepared)

    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)


async def test_purchase_requires_context(booking: BookingService) -> None:
    result = await booking.purchase(None, 2, [7], {}, PaymentMethod.CASH)

    assert isinstance(result, Err)
    assert isinstance(result.error, AuthenticationError)


async def test_purchase_validation_errors(booking: BookingService) -> None:
    cases = [
        (2, [], {}, PaymentMethod.CASH),
        (2, [1, 2, 3, 4, 5, 6], {}, PaymentMethod.CASH),
        (2, [7, 7], {}, PaymentMethod.CASH),
        (99, [7], {}, PaymentMethod.CASH),
        (3, [7], {}, PaymentMethod.CASH),
        (4, [7], {}, PaymentMethod.CASH),
        (2, [11], {}, PaymentMethod.CASH),
        (2, [7], {10: 0}, PaymentMethod.CASH),
        (2, [7], {11: 1}, PaymentMethod.CASH),
        (2, [7], {99: 1}, PaymentMethod.CASH),
        (2, [7], {}, None),
    ]
    for showtime_id, seat_ids, combos, payment in cases:
        result = await booking.purchase(ALICE, showtime_id, seat_ids, combos, payment)
        assert isinstance(result, Err), (showtime_id, seat_ids, combos, payment)
        assert isinstance(result.error, ValidationError)

    assert (await booking.occupied_seats(2)).value == set()


# ---------------------------------------------------------------------------
# Receipts
# ---------------------------------------------------------------------------


async def test_receipt_failure_keeps_the_sale_and_can_be_retried(
    seeded_factory: async_sessionmaker[AsyncSession],
    booking_settings: Settings,
    clock: FakeClock,
    tmp_path: Path,
) -> None:
    receipts = FlakyReceiptGenerator(tmp_path / "flaky")
    booking = BookingService(seeded_factory, receipts, config=booking_settings, clock=clock)

    result = await buy(booking, ALICE, [3])

    assert isinstance(result, Ok)
    confirmation = result.value
    assert confirmation.receipt_location is None
    assert confirmation.receipt_warning is not None
    assert confirmation.receipt_warning.purchase_id == confirmation.purchase_id
    purchase = await get_purchase(seeded_factory, confirmation.purchase_id)
    assert purchase.status is PurchaseStatus.CONFIRMED
    assert purchase.receipt_location is None
    assert (await booking.occupied_seats(2)).value == {3}

    receipts.healthy = True
    retry = await booking.generate_receipt(confirmation.purchase_id)

    assert isinstance(retry, Ok)
    assert Path(retry.value).is_file()
    purchase = await get_purchase(seeded_factory, confirmation.purchase_id)
    assert purchase.receipt_location == retry.value


async def test_generate_receipt_is_repeatable(booking: BookingService) -> None:
    purchase_id = (await buy(booking, ALICE, [4], {10: 1})).value.purchase_id

    first = (await booking.generate_receipt(purchase_id)).value
    second = (await booking.generate_receipt(purchase_id)).value

    assert first == second
    content = Path(second).read_text(encoding="utf-8")
    assert f"RECEIPT #{purchase_id}" in content
    assert "Showtime: 2" in content
    assert "43000" in content


async def test_generate_receipt_for_unknown_purchase(booking: BookingService) -> None:
    result = await booking.generate_receipt(999)

    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


async def test_cancel_releases_seats_for_resale(
    booking: BookingService,
    seeded_factory: async_sessionmaker[AsyncSession],
) -> None:
    purchase_id = (await buy(booking, ALICE, [7, 8], {10: 2})).value.purchase_id

    result = await booking.cancel_purchase(purchase_id)

    assert isinstance(result, Ok)
    cancelled = result.value
    assert cancelled.status is PurchaseStatus.CANCELLED
    assert cancelled.cancelled_at is not None
    assert (await booking.occupied_seats(2)).value == set()

    async with seeded_factory() as db:
        tickets = await BookingStores(db).seat_ledger.list_for_purchase(purchase_id)
        line_items = await BookingStores(db).line_items.list_for_purchase(purchase_id)
    assert all(t.status is TicketStatus.CANCELLED for t in tickets)
    assert len(line_items) == 1

    resale = await buy(booking, BOB, [7, 8])
    assert isinstance(resale, Ok)
    assert (await booking.occupied_seats(2)).value == {7, 8}


async def test_cancel_twice_is_rejected(booking: BookingService) -> None:
    purchase_id = (await buy(booking, ALICE, [5])).value.purchase_id
    assert isinstance(await booking.cancel_purchase(purchase_id), Ok)

    result = await booking.cancel_purchase(purchase_id)

    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)


async def test_cancel_racing_an_earlier_cancel_is_rejected(
    booking: BookingService,
    seeded_factory: async_sessionmaker[AsyncSession],
) -> None:
    purchase_id = (await buy(booking, ALICE, [5, 6])).value.purchase_id
    # Read while still CONFIRMED, as a concurrent request would have
    stale = await get_purchase(seeded_factory, purchase_id)
    assert isinstance(await booking.cancel_purchase(purchase_id), Ok)

    with patch.object(PurchaseStore, "get", AsyncMock(return_value=stale)):
        result = await booking.cancel_purchase(purchase_id)

    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)
    assert "already cancelled" in result.error.message
    purchase = await get_purchase(seeded_factory, purchase_id)
    assert purchase.status is PurchaseStatus.CANCELLED
    assert (await booking.occupied_seats(2)).value == set()


async def test_cancel_unknown_purchase(booking: BookingService) -> None:
    result = await booking.cancel_purchase(12345)

    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)


async def test_cancel_after_showtime_started_is_rejected(
    booking: BookingService,
    seeded_factory: async_sessionmaker[AsyncSession],
    clock: FakeClock,
) -> None:
    purchase_id = (await buy(booking, ALICE, [6])).value.purchase_id
    clock.advance(timedelta(days=1))

    result = await booking.cancel_purchase(purchase_id)

    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)
    purchase = await get_purchase(seeded_factory, purchase_id)
    assert purchase.status is PurchaseStatus.CONFIRMED
    assert (await booking.occupied_seats(2)).value == {6}


async def test_cancel_inside_cutoff_window_is_rejected(
    seeded_factory: async_sessionmaker[AsyncSession],
    booking_settings: Settings,
    clock: FakeClock,
) -> None:
    config = booking_settings.model_copy(update={"cancellation_cutoff_minutes": 60})
    booking = BookingService(
        seeded_factory,
        TextReceiptGenerator(config.receipt_output_dir),
        config=config,
        clock=clock,
    )
    purchase_id = (await buy(booking, ALICE, [2])).value.purchase_id

    clock.advance(timedelta(hours=23, minutes=30))
    late = await booking.cancel_purchase(purchase_id)
    assert isinstance(late, Err)
    assert isinstance(late.error, ValidationError)


async def test_cancel_purchase_without_tickets(
    booking: BookingService,
    seeded_factory: async_sessionmaker[AsyncSession],
) -> None:
    async with seeded_factory() as db:
        purchase = Purchase(user_id=1, purchased_at=NOW, payment_method=PaymentMethod.CASH)
        purchase.set_totals(Decimal("0"), Decimal("0"))
        purchase_id = await BookingStores(db).purchases.insert(purchase)
        await db.commit()

    result = await booking.cancel_purchase(purchase_id)

    assert isinstance(result, Ok)
    assert result.value.status is PurchaseStatus.CANCELLED


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def test_seat_map_flags_occupied_seats(booking: BookingService) -> None:
    await buy(booking, ALICE, [2, 3])

    result = await booking.seat_map(2)

    assert isinstance(result, Ok)
    entries = result.value
    assert [entry.seat.id for entry in entries] == list(range(1, 11))
    assert {entry.seat.id for entry in entries if entry.occupied} == {2, 3}


async def test_seat_map_for_unknown_showtime(booking: BookingService) -> None:
    result = await booking.seat_map(404)

    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)


async def test_list_purchases_newest_first(booking: BookingService, clock: FakeClock) -> None:
    first = (await buy(booking, ALICE, [1])).value.purchase_id
    clock.advance(timedelta(minutes=5))
    second = (await buy(booking, ALICE, [2])).value.purchase_id
    await buy(booking, BOB, [3])

    purchases = (await booking.list_purchases(ALICE)).value

    assert [p.id for p in purchases] == [second, first]


async def test_available_combos_excludes_unavailable(booking: BookingService) -> None:
    combos = (await booking.available_combos()).value

    assert [c.id for c in combos] == [10]
