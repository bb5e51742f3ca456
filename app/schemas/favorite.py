from pydantic import BaseModel
from typing import List
from datetime import datetime
from uuid import UUID

from app.schemas.property import PropertyListItem


class FavoriteResponse(BaseModel):
    """Schema for favorite response"""
    id: UUID
    user_id: UUID
    property_id: UUID
    created_at: datetime

    class Config:
        from_attributes = True


class FavoriteWithProperty(FavoriteResponse):
    """Favorite together with a summary of the listing"""
    property: PropertyListItem


class FavoriteListResponse(BaseModel):
    items: List[FavoriteWithProperty]
    total: int
    page: int
    page_size: int


class FavoriteStatus(BaseModel):
    property_id: UUID
    is_favorite: bool
