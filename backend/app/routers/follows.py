"""
Follow router: follow/unfollow profiles and manage notification preferences.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_user, require_end_user
from ..exceptions import NotFoundError
from ..models import User
from ..schemas.common import ApiResponse, Page, ok
from ..schemas.follow import (
    FollowedProfile,
    FollowRequest,
    FollowResponse,
    FollowStatus,
    NotificationPreferencesSchema,
    UserFollowStats,
)
from ..services.follow_service import FollowService, NotificationPreferences

router = APIRouter(prefix="/api/follow", tags=["follow"])
my_router = APIRouter(prefix="/api/my", tags=["follow"])


def to_preferences(schema: Optional[NotificationPreferencesSchema]) -> Optional[NotificationPreferences]:
    if schema is None:
        return None
    return NotificationPreferences(email=schema.email, sms=schema.sms, push=schema.push)


@router.post("/profiles/{profile_id}", response_model=ApiResponse[FollowResponse], status_code=status.HTTP_201_CREATED)
def follow_profile(
    profile_id: str,
    follow_data: Optional[FollowRequest] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Follow a profile; following again just updates the preferences."""
    preferences = to_preferences(follow_data.notification_preferences if follow_data else None)
    follow = FollowService(db).follow(current_user, profile_id, preferences)
    return ok(FollowResponse.model_validate(follow), "Profile followed successfully")


@router.delete("/profiles/{profile_id}", response_model=ApiResponse)
def unfollow_profile(
    profile_id: str,
    current_user: User = Depends(require_end_user),
    db: Session = Depends(get_db)
):
    if not FollowService(db).unfollow(current_user.id, profile_id):
        raise NotFoundError("You do not follow this profile")
    return ok(message="Profile unfollowed successfully")


@router.get("/profiles/{profile_id}/status", response_model=ApiResponse[FollowStatus])
def follow_status(
    profile_id: str,
    current_user: User = Depends(require_end_user),
    db: Session = Depends(get_db)
):
    preferences = FollowService(db).get_preferences(current_user.id, profile_id)
    return ok(FollowStatus(
        is_following=preferences is not None,
        notification_preferences=preferences.as_dict() if preferences else None,
    ))


@router.get("/profiles/{profile_id}/notifications", response_model=ApiResponse[NotificationPreferencesSchema])
def get_notification_preferences(
    profile_id: str,
    current_user: User = Depends(require_end_user),
    db: Session = Depends(get_db)
):
    preferences = FollowService(db).get_preferences(current_user.id, profile_id)
    if preferences is None:
        raise NotFoundError("You do not follow this profile")
    return ok(NotificationPreferencesSchema(**preferences.as_dict()))


@router.put("/profiles/{profile_id}/notifications", response_model=ApiResponse[NotificationPreferencesSchema])
def update_notification_preferences(
    profile_id: str,
    preferences_data: NotificationPreferencesSchema,
    current_user: User = Depends(require_end_user),
    db: Session = Depends(get_db)
):
    FollowService(db).update_preferences(current_user.id, profile_id, to_preferences(preferences_data))
    return ok(preferences_data, "Notification preferences updated")


@my_router.get("/followed-profiles", response_model=ApiResponse[Page[FollowedProfile]])
def my_followed_profiles(
    page: int = 1,
    per_page: int = Query(20, ge=1, le=100),
    current_user: User = Depends(require_end_user),
    db: Session = Depends(get_db)
):
    follows, pagination = FollowService(db).list_followed_profiles(current_user.id, page, per_page)
    return ok(Page[FollowedProfile](
        items=[FollowedProfile.model_validate(f) for f in follows],
        pagination=pagination,
    ))


@my_router.get("/follow-stats", response_model=ApiResponse[UserFollowStats])
def my_follow_stats(
    current_user: User = Depends(require_end_user),
    db: Session = Depends(get_db)
):
    return ok(UserFollowStats(**FollowService(db).user_follow_stats(current_user.id)))
