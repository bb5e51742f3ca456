from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID

from app.models.property import Currency


class PriceHistoryResponse(BaseModel):
    """One price change of a listing"""
    id: UUID
    property_id: UUID
    old_price: int
    new_price: int
    currency: Currency
    change_percent: float
    changed_by: Optional[UUID] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PriceStats(BaseModel):
    """
    Price movement over the whole history of a listing

    first_price is the price before the oldest change, current_price the
    price after the newest one.
    """
    min_price: int
    max_price: int
    first_price: int
    current_price: int
    price_change: int
    price_change_percent: float
    total_changes: int
