"""Pydantic schemas for concession combos."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class ComboResponse(BaseModel):
    """Combo response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    category: str | None = None
    price: Decimal
