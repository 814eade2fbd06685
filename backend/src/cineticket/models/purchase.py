"""Purchase model: the transaction grouping seat tickets and concessions."""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cineticket.models.base import Base, Money, TimestampMixin


class PurchaseStatus(enum.Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class PaymentMethod(enum.Enum):
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    PSE = "PSE"
    BANK_TRANSFER = "BANK_TRANSFER"
    CASH = "CASH"


class Purchase(Base, TimestampMixin):
    """
    Purchase model.

    total_general is always derived from total_seats and total_concessions via
    set_totals(); the check constraint rejects any row where it drifts.
    """

    __tablename__ = "purchases"
    __table_args__ = (
        CheckConstraint(
            "total_general = total_seats + total_concessions",
            name="ck_purchase_total_general",
        ),
        CheckConstraint(
            "(status = 'CANCELLED') = (cancelled_at IS NOT NULL)",
            name="ck_purchase_cancelled_at",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    purchased_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    total_seats: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_concessions: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_general: Mapped[Decimal] = mapped_column(Money, nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod, name="payment_method"),
        nullable=False,
    )
    status: Mapped[PurchaseStatus] = mapped_column(
        Enum(PurchaseStatus, name="purchase_status"),
        default=PurchaseStatus.CONFIRMED,
        nullable=False,
        index=True,
    )
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    receipt_location: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Purchase(id={self.id}, user_id={self.user_id}, "
            f"status={self.status}, total_general={self.total_general})>"
        )

    def set_totals(self, total_seats: Decimal, total_concessions: Decimal) -> None:
        self.total_seats = total_seats
        self.total_concessions = total_concessions
        self.total_general = total_seats + total_concessions

    @property
    def is_confirmed(self) -> bool:
        return self.status is PurchaseStatus.CONFIRMED
