"""
Notifications router: history and global preferences for end users.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import require_end_user
from ..models import User
from ..schemas.common import ApiResponse, Page, ok
from ..schemas.follow import NotificationPreferencesSchema
from ..schemas.notification import NotificationResponse
from ..services.follow_service import FollowService, NotificationPreferences
from ..services.notification_service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("/history", response_model=ApiResponse[Page[NotificationResponse]])
def notification_history(
    page: int = 1,
    per_page: int = Query(20, ge=1, le=100),
    current_user: User = Depends(require_end_user),
    db: Session = Depends(get_db)
):
    """Notifications received by the caller, newest first."""
    notifications, pagination = NotificationService(db).user_history(current_user.id, page, per_page)
    return ok(Page[NotificationResponse](
        items=[NotificationResponse.model_validate(n) for n in notifications],
        pagination=pagination,
    ))


@router.put("/global-preferences", response_model=ApiResponse[NotificationPreferencesSchema])
def update_global_preferences(
    preferences_data: NotificationPreferencesSchema,
    current_user: User = Depends(require_end_user),
    db: Session = Depends(get_db)
):
    """Overwrite the preferences of every profile the caller follows."""
    preferences = NotificationPreferences(
        email=preferences_data.email, sms=preferences_data.sms, push=preferences_data.push
    )
    FollowService(db).update_all_preferences_for_user(current_user.id, preferences)
    return ok(preferences_data, "Global notification preferences updated")
