"""Builds a draft purchase from a seat selection and concession quantities."""

from collections.abc import Callable, Mapping
from datetime import datetime

from cineticket.errors import ValidationError
from cineticket.models.purchase import PaymentMethod
from cineticket.services.drafts import ConcessionLineItemDraft, PreparedPurchase
from cineticket.services.reservation import ReservationBuilder
from cineticket.stores import BookingStores
from cineticket.utils.clock import utcnow


class PurchaseAssembler:
    """Combines reservation drafts with priced concession line items."""

    def __init__(
        self,
        stores: BookingStores,
        reservations: ReservationBuilder,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.stores = stores
        self.reservations = reservations
        self.clock = clock

    async def assemble(
        self,
        user_id: int | None,
        showtime_id: int | None,
        seat_ids: list[int],
        combos: Mapping[int, int] | None,
        payment_method: PaymentMethod | None,
    ) -> PreparedPurchase:
        """
        Prepare a CONFIRMED purchase bundle without persisting anything.

        Reservation errors propagate unchanged.

        Raises:
            ValidationError: Missing user, showtime or payment method, or an
                unknown, unavailable or non-positive concession line.
            SeatUnavailableError: From the reservation builder.
        """
        if user_id is None:
            raise ValidationError("User id is required")
        if showtime_id is None:
            raise ValidationError("Showtime id is required")
        if payment_method is None:
            raise ValidationError("Payment method is required")

        seat_tickets = await self.reservations.build(showtime_id, seat_ids)
        line_items = await self._price_concessions(combos or {})

        return PreparedPurchase.build(
            user_id=user_id,
            showtime_id=showtime_id,
            payment_method=payment_method,
            purchased_at=self.clock(),
            seat_tickets=seat_tickets,
            line_items=line_items,
        )

    async def _price_concessions(self, combos: Mapping[int, int]) -> list[ConcessionLineItemDraft]:
        items: list[ConcessionLineItemDraft] = []
        for combo_id, quantity in combos.items():
            if quantity is None or quantity <= 0:
                raise ValidationError(f"Quantity for combo {combo_id} must be greater than zero")
            combo = await self.stores.concessions.get(combo_id)
            if combo is None:
                raise ValidationError(f"Combo {combo_id} not found")
            if not combo.is_available:
                raise ValidationError(f"Combo {combo_id} is not available for sale")
            items.append(ConcessionLineItemDraft(combo_id=combo.id, quantity=quantity, unit_price=combo.price))
        return items
