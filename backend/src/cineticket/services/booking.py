"""Booking facade: every operation returns an Ok/Err result."""

import logging
from collections.abc import AsyncIterator, Callable, Mapping
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cineticket.config import Settings, settings
from cineticket.errors import StorageError
from cineticket.models.concession import Combo
from cineticket.models.purchase import PaymentMethod, Purchase
from cineticket.services.assembler import PurchaseAssembler
from cineticket.services.availability import AvailabilityChecker, SeatAvailability
from cineticket.services.cancellation import CancellationCoordinator
from cineticket.services.context import RequestContext, require_context
from cineticket.services.drafts import PreparedPurchase, SeatTicketDraft
from cineticket.services.receipts import ReceiptGenerator
from cineticket.services.reservation import ReservationBuilder
from cineticket.services.result import returns_result
from cineticket.services.transaction import PurchaseConfirmation, PurchaseTransactionCoordinator
from cineticket.stores import BookingStores
from cineticket.utils.clock import utcnow

logger = logging.getLogger(__name__)


class BookingService:
    """
    Entry point for the booking core.

    Recoverable outcomes (bad input, a seat lost to another buyer, a missing
    user, a failed receipt) come back as ``Err``. Storage failures raise
    ``StorageError``.

    Each call opens its own session from the injected factory and closes it
    before returning.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        receipt_generator: ReceiptGenerator,
        config: Settings = settings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.max_seats = config.max_seats_per_purchase
        self.clock = clock
        self.transactions = PurchaseTransactionCoordinator(session_factory, receipt_generator)
        self.cancellations = CancellationCoordinator(
            session_factory,
            clock=clock,
            cutoff_minutes=config.cancellation_cutoff_minutes,
        )

    @asynccontextmanager
    async def _stores(self) -> AsyncIterator[BookingStores]:
        try:
            async with self.session_factory() as db:
                yield BookingStores(db)
        except SQLAlchemyError as e:
            logger.error(f"Storage read failed: {e}", exc_info=True)
            raise StorageError("Storage is temporarily unavailable") from e

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    @returns_result
    async def occupied_seats(self, showtime_id: int) -> set[int]:
        async with self._stores() as stores:
            return await AvailabilityChecker(stores).occupied_seats(showtime_id)

    @returns_result
    async def is_available(self, showtime_id: int, seat_id: int) -> bool:
        async with self._stores() as stores:
            return await AvailabilityChecker(stores).is_available(showtime_id, seat_id)

    @returns_result
    async def seat_map(self, showtime_id: int) -> list[SeatAvailability]:
        async with self._stores() as stores:
            return await AvailabilityChecker(stores).seat_map(showtime_id)

    # ------------------------------------------------------------------
    # Purchasing
    # ------------------------------------------------------------------

    @returns_result
    async def reserve_seats(self, showtime_id: int, seat_ids: list[int]) -> list[SeatTicketDraft]:
        async with self._stores() as stores:
            return await ReservationBuilder(stores, self.max_seats).build(showtime_id, seat_ids)

    @returns_result
    async def prepare_purchase(
        self,
        ctx: RequestContext | None,
        showtime_id: int,
        seat_ids: list[int],
        combos: Mapping[int, int] | None,
        payment_method: PaymentMethod | None,
    ) -> PreparedPurchase:
        return await self._prepare(ctx, showtime_id, seat_ids, combos, payment_method)

    @returns_result
    async def commit_purchase(self, prepared: PreparedPurchase) -> PurchaseConfirmation:
        return await self.transactions.commit(prepared)

    @returns_result
    async def purchase(
        self,
        ctx: RequestContext | None,
        showtime_id: int,
        seat_ids: list[int],
        combos: Mapping[int, int] | None,
        payment_method: PaymentMethod | None,
    ) -> PurchaseConfirmation:
        """Prepare and commit in one call."""
        prepared = await self._prepare(ctx, showtime_id, seat_ids, combos, payment_method)
        return await self.transactions.commit(prepared)

    @returns_result
    async def generate_receipt(self, purchase_id: int) -> str:
        return await self.transactions.generate_receipt(purchase_id)

    @returns_result
    async def cancel_purchase(self, purchase_id: int) -> Purchase:
        return await self.cancellations.cancel(purchase_id)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @returns_result
    async def list_purchases(self, ctx: RequestContext | None) -> list[Purchase]:
        ctx = require_context(ctx)
        async with self._stores() as stores:
            return await stores.purchases.list_for_user(ctx.user_id)

    @returns_result
    async def available_combos(self) -> list[Combo]:
        async with self._stores() as stores:
            return await stores.concessions.list_available()

    async def _prepare(
        self,
        ctx: RequestContext | None,
        showtime_id: int,
        seat_ids: list[int],
        combos: Mapping[int, int] | None,
        payment_method: PaymentMethod | None,
    ) -> PreparedPurchase:
        ctx = require_context(ctx)
        async with self._stores() as stores:
            assembler = PurchaseAssembler(stores, ReservationBuilder(stores, self.max_seats), clock=self.clock)
            return await assembler.assemble(ctx.user_id, showtime_id, seat_ids, combos, payment_method)
