"""
Map markers and viewport configuration built on the nearby search.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import BusinessProfile
from .profile_search_service import ProfileSearchService

logger = logging.getLogger(__name__)
settings = get_settings()

DEFAULT_CATEGORY = "General"
DEFAULT_CATEGORY_COLOR = "#6B7280"


class MapService:
    """Service for map rendering data."""

    def __init__(self, db: Session):
        self.search = ProfileSearchService(db)

    def marker(self, profile: BusinessProfile) -> Dict[str, Any]:
        category = profile.categories[0] if profile.categories else None
        return {
            "id": profile.id,
            "slug": profile.slug,
            "position": {"lat": profile.latitude, "lng": profile.longitude},
            "title": profile.name,
            "category": category.name if category else DEFAULT_CATEGORY,
            "category_color": (category.color if category and category.color else DEFAULT_CATEGORY_COLOR),
            "distance": round(profile.distance, 2) if profile.distance is not None else None,
            "logo_path": profile.logo_path,
            "address": profile.address,
            "phone": profile.phone,
            "website": profile.website,
        }

    def markers(self, latitude: float, longitude: float, radius_km: Optional[float] = None) -> List[Dict[str, Any]]:
        profiles = self.search.nearby(latitude, longitude, radius_km)
        return [self.marker(profile) for profile in profiles]

    def config(self) -> Dict[str, Any]:
        return {
            "default_center": {"lat": settings.map_default_lat, "lng": settings.map_default_lng},
            "default_zoom": settings.map_default_zoom,
            "min_zoom": 8,
            "max_zoom": 18,
            "cluster_max_zoom": 15,
            "search_radius": {
                "default": settings.search_default_radius_km,
                "min": settings.search_min_radius_km,
                "max": settings.search_max_radius_km,
            },
        }

    def bounds(self, markers: List[Dict[str, Any]]) -> Dict[str, float]:
        """Smallest box containing every marker; the default center when empty."""
        if not markers:
            lat, lng = settings.map_default_lat, settings.map_default_lng
            return {"north": lat, "south": lat, "east": lng, "west": lng}

        lats = [m["position"]["lat"] for m in markers]
        lngs = [m["position"]["lng"] for m in markers]
        return {"north": max(lats), "south": min(lats), "east": max(lngs), "west": min(lngs)}
