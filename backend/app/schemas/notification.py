"""
Notification history schemas.
"""
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import AliasChoices, BaseModel, Field


class NotificationProfile(BaseModel):
    id: str
    name: str
    slug: str

    class Config:
        from_attributes = True


class NotificationResponse(BaseModel):
    id: str
    business_profile_id: str
    channel: str
    subject: str
    message: str
    status: str
    sent_at: Optional[datetime] = None
    # ORM attribute is `meta`; "metadata" is reserved on declarative models
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias=AliasChoices("meta", "metadata"))
    created_at: datetime
    business_profile: Optional[NotificationProfile] = None

    class Config:
        from_attributes = True
