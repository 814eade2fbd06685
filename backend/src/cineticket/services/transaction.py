"""Purchase commit path: one all-or-nothing transaction, then the receipt."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cineticket.errors import (
    BookingError,
    ReceiptGenerationError,
    SeatUnavailableError,
    StorageError,
    ValidationError,
)
from cineticket.models.seat_ticket import SeatTicket
from cineticket.services.drafts import PreparedPurchase
from cineticket.services.receipts import ReceiptGenerator
from cineticket.stores import BookingStores, UniquenessViolation
from cineticket.utils.clock import as_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReceiptWarning:
    """The sale committed but its receipt could not be produced or recorded."""

    purchase_id: int
    message: str


@dataclass(frozen=True)
class PurchaseConfirmation:
    purchase_id: int
    receipt_location: str | None
    receipt_warning: ReceiptWarning | None = None


class PurchaseTransactionCoordinator:
    """
    Persists a prepared purchase.

    The purchase row, its seat tickets and its concession line items are
    written in a single transaction. Seat ownership is decided by the partial
    unique index on active tickets: when two buyers race for a seat, exactly
    one insert succeeds and the loser's whole transaction is rolled back.

    Receipt generation runs afterwards in its own transaction and can never
    undo a committed sale.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        receipt_generator: ReceiptGenerator,
    ) -> None:
        self.session_factory = session_factory
        self.receipt_generator = receipt_generator

    async def commit(self, prepared: PreparedPurchase) -> PurchaseConfirmation:
        """
        Commit a prepared purchase and attach its receipt.

        Raises:
            ValidationError: The purchase has no seat tickets.
            SeatUnavailableError: Another purchase took one of the seats first.
                Nothing from this purchase was persisted.
            StorageError: Unexpected persistence failure, after full rollback.
        """
        if not prepared.seat_tickets:
            raise ValidationError("A purchase must include at least one seat")

        purchase_id = await self._persist(prepared)
        logger.info(
            f"Committed purchase {purchase_id}: {len(prepared.seat_tickets)} seats, "
            f"{len(prepared.line_items)} concession lines, total {prepared.purchase.total_general}"
        )

        try:
            location = await self._attach_receipt(purchase_id)
        except BookingError as e:
            logger.warning(f"Receipt for purchase {purchase_id} failed, sale stands: {e}")
            return PurchaseConfirmation(
                purchase_id=purchase_id,
                receipt_location=None,
                receipt_warning=ReceiptWarning(purchase_id=purchase_id, message=e.message),
            )

        return PurchaseConfirmation(purchase_id=purchase_id, receipt_location=location)

    async def generate_receipt(self, purchase_id: int) -> str:
        """
        Regenerate the receipt of a committed purchase and store its location.

        Safe to call repeatedly; each call overwrites the previous location.

        Raises:
            ValidationError: Unknown purchase.
            ReceiptGenerationError: The generator failed.
            StorageError: The location could not be recorded.
        """
        return await self._attach_receipt(purchase_id)

    async def _persist(self, prepared: PreparedPurchase) -> int:
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    stores = BookingStores(db)
                    purchase_id = await stores.purchases.insert(prepared.purchase.to_row())

                    for draft in prepared.seat_tickets:
                        try:
                            await stores.seat_ledger.insert_ticket(draft.to_row(purchase_id))
                        except UniquenessViolation as e:
                            logger.warning(
                                f"Lost race for seat {draft.seat_id} on showtime {draft.showtime_id}, "
                                f"rolling back purchase"
                            )
                            raise SeatUnavailableError(draft.seat_id) from e

                    for item in prepared.line_items:
                        await stores.line_items.insert(item.to_row(purchase_id))
        except SQLAlchemyError as e:
            logger.error(f"Purchase commit failed, transaction rolled back: {e}", exc_info=True)
            raise StorageError("Purchase could not be saved") from e

        return purchase_id

    async def _attach_receipt(self, purchase_id: int) -> str:
        """
        Load, generate, then record the location.

        The generator can be slow, so it runs with no session checked out;
        loading and recording each use their own short session.
        """
        try:
            async with self.session_factory() as db:
                stores = BookingStores(db)
                purchase = await stores.purchases.get(purchase_id)
                if purchase is None:
                    raise ValidationError(f"Purchase {purchase_id} not found")

                tickets = await stores.seat_ledger.list_for_purchase(purchase_id)
                line_items = await stores.line_items.list_for_purchase(purchase_id)
                extra = await self._receipt_context(stores, tickets)
        except SQLAlchemyError as e:
            logger.error(f"Could not load purchase {purchase_id} for its receipt: {e}", exc_info=True)
            raise StorageError(f"Purchase {purchase_id} could not be loaded") from e

        try:
            location = await self.receipt_generator.generate(purchase, tickets, line_items, extra)
        except Exception as e:
            logger.warning(f"Receipt generator failed for purchase {purchase_id}: {e}")
            raise ReceiptGenerationError(f"Receipt for purchase {purchase_id} could not be generated") from e

        try:
            async with self.session_factory() as db:
                async with db.begin():
                    stores = BookingStores(db)
                    stored = await stores.purchases.get(purchase_id)
                    if stored is None:
                        raise ValidationError(f"Purchase {purchase_id} not found")
                    stored.receipt_location = location
                    await stores.purchases.update(stored)
        except SQLAlchemyError as e:
            logger.error(f"Could not record receipt for purchase {purchase_id}: {e}", exc_info=True)
            raise StorageError(f"Receipt location for purchase {purchase_id} could not be saved") from e

        logger.info(f"Receipt for purchase {purchase_id} stored at {location}")
        return location

    async def _receipt_context(self, stores: BookingStores, tickets: list[SeatTicket]) -> dict[str, str]:
        if not tickets:
            return {}
        showtime = await stores.showtimes.get(tickets[0].showtime_id)
        if showtime is None:
            return {"Showtime": str(tickets[0].showtime_id)}
        return {
            "Showtime": str(showtime.id),
            "Room": str(showtime.room_id),
            "Starts at": as_utc(showtime.starts_at).isoformat(),
        }
