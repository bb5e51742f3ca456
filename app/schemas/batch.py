from pydantic import BaseModel, Field
from typing import Dict


class NearestMetroSummary(BaseModel):
    """Result of the nearest-metro backfill"""
    stations: int = 0
    total: int = 0
    updated: int = 0
    errors: int = 0


class MetroSeedSummary(BaseModel):
    total: int = 0
    per_line: Dict[str, int] = Field(default_factory=dict)


class FavoritesBackfillSummary(BaseModel):
    """Result of copying historical favorites into property_analytics"""
    favorites: int = 0
    groups: int = 0
    upserted: int = 0


class PriceSeedSummary(BaseModel):
    properties: int = 0
    records: int = 0
    cleared: int = 0
