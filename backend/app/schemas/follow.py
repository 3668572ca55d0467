"""
Follow and notification preference schemas.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from .business_profile import BusinessProfileResponse


class NotificationPreferencesSchema(BaseModel):
    """Per-channel toggles; defaults match a fresh follow."""
    email: bool = True
    sms: bool = False
    push: bool = True


class FollowRequest(BaseModel):
    notification_preferences: Optional[NotificationPreferencesSchema] = None


class FollowResponse(BaseModel):
    id: str
    user_id: str
    business_profile_id: str
    email_notifications: bool
    sms_notifications: bool
    push_notifications: bool
    created_at: datetime

    class Config:
        from_attributes = True


class FollowStatus(BaseModel):
    is_following: bool
    notification_preferences: Optional[NotificationPreferencesSchema] = None


class FollowedProfile(FollowResponse):
    """A follow with the followed profile embedded."""
    business_profile: BusinessProfileResponse


class UserFollowStats(BaseModel):
    total_following: int
    with_email_notifications: int
    with_sms_notifications: int
    with_push_notifications: int
