from pydantic import BaseModel, Field
from typing import List
from datetime import date as date_type
from uuid import UUID


class DailyStat(BaseModel):
    date: date_type
    views: int
    favorites: int
    contacts: int


class PropertyAnalyticsSummary(BaseModel):
    """
    Engagement of a single listing

    Favorites are net of unfavorites. Trends compare the last 7 recorded
    days with the 7 before them, in percent.
    """
    total_views: int = 0
    total_favorites: int = 0
    total_contacts: int = 0
    views_today: int = 0
    favorites_today: int = 0
    contacts_today: int = 0
    views_trend: float = 0.0
    favorites_trend: float = 0.0
    contacts_trend: float = 0.0
    daily_stats: List[DailyStat] = Field(default_factory=list)


class PropertyPerformance(BaseModel):
    property_id: UUID
    title: str
    total_views: int = 0
    total_favorites: int = 0
    total_contacts: int = 0
    avg_views_per_day: float = 0.0


class UserPropertiesAnalytics(BaseModel):
    """Engagement across all listings of one owner, busiest first"""
    total_views: int = 0
    total_favorites: int = 0
    total_contacts: int = 0
    property_performance: List[PropertyPerformance] = Field(default_factory=list)
