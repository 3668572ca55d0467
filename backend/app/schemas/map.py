"""
Map marker schemas.
"""
from typing import List, Optional
from pydantic import BaseModel


class Position(BaseModel):
    lat: float
    lng: float


class MapMarker(BaseModel):
    id: str
    slug: str
    position: Position
    title: str
    category: str
    category_color: str
    distance: Optional[float] = None
    logo_path: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None


class MapBounds(BaseModel):
    north: float
    south: float
    east: float
    west: float


class MapMarkers(BaseModel):
    markers: List[MapMarker]
    bounds: MapBounds
    center: Position
    radius: float
    total: int


class SearchRadius(BaseModel):
    default: float
    min: float
    max: float


class MapConfig(BaseModel):
    default_center: Position
    default_zoom: int
    min_zoom: int
    max_zoom: int
    cluster_max_zoom: int
    search_radius: SearchRadius
