"""
Business profiles router: public search and lookup, owner-only mutations.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_user_optional, require_business_user
from ..models import User
from ..schemas.common import ApiResponse, Page, ok
from ..schemas.business_profile import (
    BusinessProfileCreate,
    BusinessProfileDetail,
    BusinessProfileResponse,
    BusinessProfileUpdate,
    ProfileStats,
)
from ..schemas.follow import FollowResponse
from ..services.follow_service import FollowService
from ..services.notification_service import NotificationService
from ..services.profile_search_service import ProfileSearchService, SearchFilters
from ..services.profile_service import ProfileService

router = APIRouter(prefix="/api/profiles", tags=["profiles"])


def _profile_page(profiles, pagination) -> Page[BusinessProfileResponse]:
    return Page[BusinessProfileResponse](
        items=[BusinessProfileResponse.model_validate(p) for p in profiles],
        pagination=pagination,
    )


@router.get("", response_model=ApiResponse[Page[BusinessProfileResponse]])
def search_profiles(
    search: Optional[str] = Query(None, max_length=255),
    category_id: Optional[str] = None,
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    radius: Optional[float] = Query(None, description="Kilometers; clamped to the configured range"),
    page: int = 1,
    per_page: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """Search active profiles by text, category and distance."""
    filters = SearchFilters(
        text=search,
        category_id=category_id,
        latitude=latitude,
        longitude=longitude,
        radius_km=radius,
        page=page,
        per_page=per_page,
    )
    result = ProfileSearchService(db).search(filters)
    return ok(_profile_page(result.profiles, result.pagination))


@router.get("/nearby", response_model=ApiResponse[List[BusinessProfileResponse]])
def nearby_profiles(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius: Optional[float] = None,
    db: Session = Depends(get_db)
):
    """Closest active profiles, nearest first."""
    profiles = ProfileSearchService(db).nearby(latitude, longitude, radius)
    return ok([BusinessProfileResponse.model_validate(p) for p in profiles])


@router.get("/{slug}", response_model=ApiResponse[BusinessProfileDetail])
def get_profile(
    slug: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: Session = Depends(get_db)
):
    """Public profile page by slug (active profiles only)."""
    service = ProfileService(db)
    profile = service.get_by_slug(slug)

    is_following = None
    if current_user is not None and current_user.is_end_user():
        is_following = FollowService(db).is_following(current_user.id, profile.id)

    return ok(BusinessProfileDetail(
        profile=BusinessProfileResponse.model_validate(profile),
        stats=ProfileStats(**service.profile_stats(profile)),
        is_following=is_following,
    ))


@router.post("", response_model=ApiResponse[BusinessProfileResponse], status_code=status.HTTP_201_CREATED)
def create_profile(
    profile_data: BusinessProfileCreate,
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    profile = ProfileService(db).create_profile(current_user, profile_data.model_dump())
    return ok(BusinessProfileResponse.model_validate(profile), "Business profile created successfully")


@router.put("/{profile_id}", response_model=ApiResponse[BusinessProfileResponse])
def update_profile(
    profile_id: str,
    profile_data: BusinessProfileUpdate,
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    """Update the caller's profile; followers are notified."""
    profile = ProfileService(db).update_profile(
        current_user, profile_id, profile_data.model_dump(exclude_unset=True)
    )
    return ok(BusinessProfileResponse.model_validate(profile), "Business profile updated successfully")


@router.delete("/{profile_id}", response_model=ApiResponse)
def delete_profile(
    profile_id: str,
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    ProfileService(db).delete_profile(current_user, profile_id)
    return ok(message="Business profile deleted successfully")


@router.patch("/{profile_id}/toggle-status", response_model=ApiResponse[BusinessProfileResponse])
def toggle_profile_status(
    profile_id: str,
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    profile = ProfileService(db).toggle_status(current_user, profile_id)
    state = "activated" if profile.is_active else "deactivated"
    return ok(BusinessProfileResponse.model_validate(profile), f"Business profile {state}")


@router.get("/{profile_id}/followers", response_model=ApiResponse[Page[FollowResponse]])
def list_profile_followers(
    profile_id: str,
    page: int = 1,
    per_page: int = Query(20, ge=1, le=100),
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    """Followers of the caller's own profile."""
    ProfileService(db).get_owned_profile(current_user, profile_id)
    follows, pagination = FollowService(db).list_followers(profile_id, page, per_page)
    return ok(Page[FollowResponse](
        items=[FollowResponse.model_validate(f) for f in follows],
        pagination=pagination,
    ))


@router.get("/{profile_id}/notification-stats", response_model=ApiResponse[dict])
def profile_notification_stats(
    profile_id: str,
    current_user: User = Depends(require_business_user),
    db: Session = Depends(get_db)
):
    """Follower channel counts and notifications sent in the last week."""
    ProfileService(db).get_owned_profile(current_user, profile_id)
    return ok(NotificationService(db).profile_notification_stats(profile_id))
