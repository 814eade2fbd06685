"""Unpersisted purchase data produced before commit."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from cineticket.models.base import ZERO
from cineticket.models.concession import ConcessionLineItem
from cineticket.models.purchase import PaymentMethod, Purchase, PurchaseStatus
from cineticket.models.seat_ticket import SeatTicket, TicketStatus


@dataclass(frozen=True)
class SeatTicketDraft:
    """A seat ticket that has passed the fast availability check but is not stored yet."""

    showtime_id: int
    seat_id: int
    unit_price: Decimal
    status: TicketStatus = TicketStatus.ACTIVE

    def to_row(self, purchase_id: int) -> SeatTicket:
        return SeatTicket(
            purchase_id=purchase_id,
            showtime_id=self.showtime_id,
            seat_id=self.seat_id,
            unit_price=self.unit_price,
            status=TicketStatus.ACTIVE,
        )


@dataclass(frozen=True)
class ConcessionLineItemDraft:
    combo_id: int
    quantity: int
    unit_price: Decimal

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError("quantity must be positive")

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_row(self, purchase_id: int) -> ConcessionLineItem:
        return ConcessionLineItem(
            purchase_id=purchase_id,
            combo_id=self.combo_id,
            quantity=self.quantity,
            unit_price=self.unit_price,
            subtotal=self.subtotal,
        )


@dataclass(frozen=True)
class PurchaseDraft:
    """Purchase header with totals computed from its tickets and line items."""

    user_id: int
    showtime_id: int
    payment_method: PaymentMethod
    purchased_at: datetime
    total_seats: Decimal
    total_concessions: Decimal
    status: PurchaseStatus = PurchaseStatus.CONFIRMED

    @property
    def total_general(self) -> Decimal:
        return self.total_seats + self.total_concessions

    def to_row(self) -> Purchase:
        purchase = Purchase(
            user_id=self.user_id,
            purchased_at=self.purchased_at,
            payment_method=self.payment_method,
            status=self.status,
        )
        purchase.set_totals(self.total_seats, self.total_concessions)
        return purchase


@dataclass(frozen=True)
class PreparedPurchase:
    """Everything the commit coordinator needs, none of it persisted."""

    purchase: PurchaseDraft
    seat_tickets: tuple[SeatTicketDraft, ...]
    line_items: tuple[ConcessionLineItemDraft, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        *,
        user_id: int,
        showtime_id: int,
        payment_method: PaymentMethod,
        purchased_at: datetime,
        seat_tickets: list[SeatTicketDraft],
        line_items: list[ConcessionLineItemDraft],
    ) -> "PreparedPurchase":
        total_seats = sum((t.unit_price for t in seat_tickets), ZERO)
        total_concessions = sum((i.subtotal for i in line_items), ZERO)
        purchase = PurchaseDraft(
            user_id=user_id,
            showtime_id=showtime_id,
            payment_method=payment_method,
            purchased_at=purchased_at,
            total_seats=total_seats,
            total_concessions=total_concessions,
        )
        return cls(purchase=purchase, seat_tickets=tuple(seat_tickets), line_items=tuple(line_items))
