"""
Profile search: text/category filters plus Haversine radius search.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, Query, selectinload

from ..config import get_settings
from ..models import BusinessProfile, Category
from .geo import bounding_box, distance_km
from .pagination import clamp, paginate_list, paginate_query

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class SearchFilters:
    """All optional; out-of-range radius and per_page are clamped, not rejected."""
    text: Optional[str] = None
    category_id: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_km: Optional[float] = None
    page: int = 1
    per_page: Optional[int] = None

    @property
    def has_center(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass
class SearchPage:
    """One page of results plus pagination metadata."""
    profiles: List[BusinessProfile] = field(default_factory=list)
    pagination: Dict[str, Any] = field(default_factory=dict)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProfileSearchService:
    """Search and map lookups over active business profiles."""

    def __init__(self, db: Session):
        self.db = db

    def clamp_radius(self, radius_km: Optional[float]) -> float:
        if radius_km is None:
            radius_km = settings.search_default_radius_km
        return clamp(radius_km, settings.search_min_radius_km, settings.search_max_radius_km)

    def clamp_per_page(self, per_page: Optional[int]) -> int:
        if per_page is None:
            per_page = settings.search_default_per_page
        return clamp(per_page, settings.search_min_per_page, settings.search_max_per_page)

    def _active_profiles(self) -> Query:
        return (
            self.db.query(BusinessProfile)
            .options(
                selectinload(BusinessProfile.categories),
                selectinload(BusinessProfile.social_networks),
            )
            .filter(BusinessProfile.is_active == True)  # noqa: E712
            .order_by(BusinessProfile.created_at, BusinessProfile.id)
        )

    def _within_radius(
        self,
        query: Query,
        latitude: float,
        longitude: float,
        radius_km: float,
    ) -> List[BusinessProfile]:
        """
        Profiles strictly closer than radius_km, nearest first.

        Each returned profile gets a transient `distance` attribute (km).
        """
        box = bounding_box(latitude, longitude, radius_km)
        query = query.filter(
            BusinessProfile.latitude.isnot(None),
            BusinessProfile.longitude.isnot(None),
            BusinessProfile.latitude.between(box.min_lat, box.max_lat),
        )
        if box.min_lon is not None:
            query = query.filter(BusinessProfile.longitude.between(box.min_lon, box.max_lon))

        matches = []
        for profile in query.all():
            distance = distance_km(latitude, longitude, profile.latitude, profile.longitude)
            if distance < radius_km:
                profile.distance = distance
                matches.append(profile)

        # sort() is stable: equal distances keep insertion order
        matches.sort(key=lambda p: p.distance)
        return matches

    def search(self, filters: SearchFilters) -> SearchPage:
        """Filter, rank by distance when a center is given, then paginate."""
        per_page = self.clamp_per_page(filters.per_page)
        page = max(1, filters.page or 1)

        query = self._active_profiles()

        if filters.category_id:
            query = query.filter(BusinessProfile.categories.any(Category.id == filters.category_id))

        text = (filters.text or "").strip()
        if text:
            pattern = f"%{_escape_like(text)}%"
            query = query.filter(or_(
                BusinessProfile.name.ilike(pattern, escape="\\"),
                BusinessProfile.description.ilike(pattern, escape="\\"),
            ))

        if filters.has_center:
            radius_km = self.clamp_radius(filters.radius_km)
            matches = self._within_radius(query, filters.latitude, filters.longitude, radius_km)
            profiles, pagination = paginate_list(matches, page, per_page)
        else:
            profiles, pagination = paginate_query(query, page, per_page)
            for profile in profiles:
                profile.distance = None

        logger.debug(f"Profile search matched {pagination['total_items']} profiles")
        return SearchPage(profiles=profiles, pagination=pagination)

    def nearby(self, latitude: float, longitude: float, radius_km: Optional[float] = None) -> List[BusinessProfile]:
        """Nearest active profiles for map rendering, capped (not paginated)."""
        radius_km = self.clamp_radius(radius_km)
        matches = self._within_radius(self._active_profiles(), latitude, longitude, radius_km)
        return matches[:settings.nearby_limit]
