"""Receipt generation for committed purchases."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path

from cineticket.models.concession import ConcessionLineItem
from cineticket.models.purchase import Purchase
from cineticket.models.seat_ticket import SeatTicket
from cineticket.utils.clock import as_utc

logger = logging.getLogger(__name__)


class ReceiptGenerator(ABC):
    """Abstract base class for receipt generators."""

    @abstractmethod
    async def generate(
        self,
        purchase: Purchase,
        tickets: Sequence[SeatTicket],
        line_items: Sequence[ConcessionLineItem],
        extra: Mapping[str, str],
    ) -> str:
        """
        Produce a receipt document and return where it can be found.

        Calling it again for the same purchase replaces the previous document.

        Args:
            purchase: The committed purchase
            tickets: Seat tickets of the purchase
            line_items: Concession line items of the purchase
            extra: Additional labelled lines (showtime details and similar)

        Returns:
            Location of the receipt (a file path for file-based generators)
        """
        pass


class TextReceiptGenerator(ReceiptGenerator):
    """Writes plain-text receipts to a directory, one file per purchase."""

    def __init__(self, output_dir: Path, filename_prefix: str = "receipt") -> None:
        self.output_dir = Path(output_dir)
        self.filename_prefix = filename_prefix

    def path_for(self, purchase_id: int) -> Path:
        return self.output_dir / f"{self.filename_prefix}_{purchase_id}.txt"

    async def generate(
        self,
        purchase: Purchase,
        tickets: Sequence[SeatTicket],
        line_items: Sequence[ConcessionLineItem],
        extra: Mapping[str, str],
    ) -> str:
        content = self.render(purchase, tickets, line_items, extra)
        path = self.path_for(purchase.id)
        await asyncio.to_thread(self._write, path, content)
        logger.debug(f"Wrote receipt for purchase {purchase.id} to {path}")
        return str(path.resolve())

    def _write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def render(
        self,
        purchase: Purchase,
        tickets: Sequence[SeatTicket],
        line_items: Sequence[ConcessionLineItem],
        extra: Mapping[str, str],
    ) -> str:
        lines = [
            f"RECEIPT #{purchase.id}",
            f"User: {purchase.user_id}",
            f"Date: {as_utc(purchase.purchased_at).isoformat()}",
            f"Payment: {purchase.payment_method.value}",
        ]
        lines.extend(f"{label}: {value}" for label, value in extra.items())

        lines.append("")
        lines.append("Seats")
        for ticket in tickets:
            lines.append(f"  Seat {ticket.seat_id:<10} {ticket.unit_price:>12}")

        if line_items:
            lines.append("")
            lines.append("Concessions")
            for item in line_items:
                lines.append(
                    f"  Combo {item.combo_id} x{item.quantity} @ {item.unit_price}  {item.subtotal:>12}"
                )

        lines.append("")
        lines.append(f"Seats total:       {purchase.total_seats:>12}")
        lines.append(f"Concessions total: {purchase.total_concessions:>12}")
        lines.append(f"TOTAL:             {purchase.total_general:>12}")
        return "\n".join(lines) + "\n"
