"""Purchase and concession line item persistence."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cineticket.models.concession import ConcessionLineItem
from cineticket.models.purchase import Purchase, PurchaseStatus


class PurchaseStore:
    """Purchase rows within the caller's session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, purchase: Purchase) -> int:
        """Persist a new purchase and return its generated id."""
        self.db.add(purchase)
        await self.db.flush()
        return purchase.id

    async def update(self, purchase: Purchase) -> bool:
        """Flush pending changes of a purchase loaded in this session."""
        self.db.add(purchase)
        await self.db.flush()
        return True

    async def get(self, purchase_id: int) -> Purchase | None:
        return await self.db.get(Purchase, purchase_id)

    async def list_for_user(self, user_id: int) -> list[Purchase]:
        """Purchases of a user, newest first."""
        query = (
            select(Purchase)
            .where(Purchase.user_id == user_id)
            .order_by(Purchase.purchased_at.desc(), Purchase.id.desc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def mark_cancelled(self, purchase_id: int, cancelled_at: datetime) -> bool:
        """
        Flip a CONFIRMED purchase to CANCELLED.

        Guarded on the current status so two concurrent cancellations cannot
        both succeed. Returns False when no CONFIRMED row matched.
        """
        stmt = (
            update(Purchase)
            .where(Purchase.id == purchase_id, Purchase.status == PurchaseStatus.CONFIRMED)
            .values(status=PurchaseStatus.CANCELLED, cancelled_at=cancelled_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount > 0


class LineItemStore:
    """Concession line items within the caller's session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, item: ConcessionLineItem) -> int:
        self.db.add(item)
        await self.db.flush()
        return item.id

    async def list_for_purchase(self, purchase_id: int) -> list[ConcessionLineItem]:
        query = (
            select(ConcessionLineItem)
            .where(ConcessionLineItem.purchase_id == purchase_id)
            .order_by(ConcessionLineItem.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
