from pydantic import BaseModel
from typing import Optional
from uuid import UUID

from app.models.metro_station import MetroLine


class MetroStationResponse(BaseModel):
    id: UUID
    name_ru: str
    name_uz: str
    line: MetroLine
    line_name_ru: str
    line_name_uz: str
    latitude: float
    longitude: float
    order: int
    opened_year: Optional[int] = None
    is_operational: bool

    class Config:
        from_attributes = True


class NearestStationResponse(BaseModel):
    """Closest operational station to a point"""
    station: MetroStationResponse
    distance: int  # meters, rounded
