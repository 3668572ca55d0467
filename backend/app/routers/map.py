"""
Map router: markers around a point and client map configuration.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.common import ApiResponse, ok
from ..schemas.map import MapConfig, MapMarkers
from ..services.map_service import MapService

router = APIRouter(prefix="/api/map", tags=["map"])


@router.get("/markers", response_model=ApiResponse[MapMarkers])
def map_markers(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius: Optional[float] = None,
    db: Session = Depends(get_db)
):
    service = MapService(db)
    radius_km = service.search.clamp_radius(radius)
    markers = service.markers(latitude, longitude, radius_km)
    return ok(MapMarkers(
        markers=markers,
        bounds=service.bounds(markers),
        center={"lat": latitude, "lng": longitude},
        radius=radius_km,
        total=len(markers),
    ))


@router.get("/config", response_model=ApiResponse[MapConfig])
def map_config(db: Session = Depends(get_db)):
    return ok(MapConfig(**MapService(db).config()))
