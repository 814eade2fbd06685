"""Concession catalog combos and the line items sold with a purchase."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cineticket.models.base import Base, Money, TimestampMixin


class Combo(Base, TimestampMixin):
    """A concession product offered for sale (popcorn, drinks, bundles)."""

    __tablename__ = "combos"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    is_available: Mapped[bool] = mapped_column(default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Combo(id={self.id}, name={self.name!r}, price={self.price})>"


class ConcessionLineItem(Base, TimestampMixin):
    """
    Concession quantity attached to a purchase.

    Unit price is frozen at booking time. Rows are never updated or deleted;
    cancelling the purchase leaves them in place.
    """

    __tablename__ = "concession_line_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_line_item_quantity_positive"),
        CheckConstraint("subtotal = quantity * unit_price", name="ck_line_item_subtotal"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    purchase_id: Mapped[int] = mapped_column(
        ForeignKey("purchases.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    combo_id: Mapped[int] = mapped_column(
        ForeignKey("combos.id", ondelete="RESTRICT"),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Money, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ConcessionLineItem(id={self.id}, combo_id={self.combo_id}, "
            f"quantity={self.quantity}, subtotal={self.subtotal})>"
        )
