"""Purchase cancellation and seat release."""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cineticket.errors import PartialCancellationError, ValidationError
from cineticket.models.purchase import Purchase
from cineticket.stores import BookingStores
from cineticket.utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)


class CancellationCoordinator:
    """
    Cancels a purchase and releases its seats.

    The purchase status flip is guarded on CONFIRMED and runs in the same
    transaction as the ticket release, so a seat is never freed for a purchase
    that stays CONFIRMED and two concurrent cancellations cannot both win.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utcnow,
        cutoff_minutes: int = 0,
    ) -> None:
        self.session_factory = session_factory
        self.clock = clock
        self.cutoff = timedelta(minutes=cutoff_minutes)

    async def cancel(self, purchase_id: int) -> Purchase:
        """
        Cancel a CONFIRMED purchase whose showtime has not started yet.

        Purchases without tickets are cancelled without a showtime check.

        Raises:
            ValidationError: Unknown purchase, already cancelled (including
                by a concurrent request), showtime missing or too close to
                its start.
            PartialCancellationError: The purchase and its tickets could not
                be cancelled together; nothing was changed.
        """
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    stores = BookingStores(db)
                    purchase = await stores.purchases.get(purchase_id)
                    if purchase is None:
                        raise ValidationError(f"Purchase {purchase_id} not found")

                    tickets = await stores.seat_ledger.list_for_purchase(purchase_id)
                    if tickets:
                        await self._check_showtime(stores, purchase, tickets[0].showtime_id)
                    elif not purchase.is_confirmed:
                        raise ValidationError(f"Purchase {purchase_id} is already cancelled")

                    if not await stores.purchases.mark_cancelled(purchase_id, self.clock()):
                        # A concurrent cancellation committed after our read
                        logger.info(f"Purchase {purchase_id} was cancelled by another request")
                        raise ValidationError(f"Purchase {purchase_id} is already cancelled")
                    released = await stores.seat_ledger.bulk_cancel_for_purchase(purchase_id)
                    await db.refresh(purchase)
        except SQLAlchemyError as e:
            logger.error(f"Cancellation of purchase {purchase_id} rolled back: {e}", exc_info=True)
            raise PartialCancellationError(f"Purchase {purchase_id} could not be cancelled") from e

        logger.info(f"Cancelled purchase {purchase_id}, released {released} seats")
        return purchase

    async def _check_showtime(self, stores: BookingStores, purchase: Purchase, showtime_id: int) -> None:
        showtime = await stores.showtimes.get(showtime_id)
        if showtime is None:
            raise ValidationError(f"Showtime {showtime_id} not found")
        if not purchase.is_confirmed:
            raise ValidationError(f"Purchase {purchase.id} is already cancelled")

        deadline = self.clock() + self.cutoff
        if as_utc(showtime.starts_at) <= deadline:
            raise ValidationError(f"Showtime {showtime_id} has already started or is too close to start")
