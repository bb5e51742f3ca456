from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID
from typing import Optional, List

from app.core.database import get_db
from app.core.exceptions import MetroStationNotFoundException
from app.models.metro_station import MetroLine
from app.schemas.metro import MetroStationResponse, NearestStationResponse
from app.services.metro_service import metro_service

router = APIRouter()


@router.get("", response_model=List[MetroStationResponse])
async def list_metro_stations(
        line: Optional[MetroLine] = None,
        db: AsyncSession = Depends(get_db)
):
    """
    Tashkent metro stations

    Ordered by line, then by position along the line.
    """
    return await metro_service.list_stations(db, line=line)


@router.get("/nearest", response_model=NearestStationResponse)
async def get_nearest_station(
        lat: float = Query(..., ge=-90, le=90),
        lng: float = Query(..., ge=-180, le=180),
        db: AsyncSession = Depends(get_db)
):
    """Closest operational station to a point, distance in meters"""
    nearest = await metro_service.find_nearest_station(db, lat, lng)
    if nearest is None:
        raise MetroStationNotFoundException()

    station, distance = nearest
    return NearestStationResponse(station=station, distance=round(distance))


@router.get("/{station_id}", response_model=MetroStationResponse)
async def get_metro_station(
        station_id: UUID,
        db: AsyncSession = Depends(get_db)
):
    station = await metro_service.get_station(db, station_id)
    if not station:
        raise MetroStationNotFoundException(str(station_id))
    return station
