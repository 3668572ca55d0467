"""
UserFollow model - an end user following a business profile.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base
from .notification import NotificationChannel


class UserFollow(Base):
    """Follow relation with per-channel notification preferences."""

    __tablename__ = "user_follows"
    __table_args__ = (
        UniqueConstraint("user_id", "business_profile_id", name="uq_user_follow_user_profile"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    business_profile_id = Column(
        String(36), ForeignKey("business_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Channel toggles
    email_notifications = Column(Boolean, default=True, nullable=False)
    sms_notifications = Column(Boolean, default=False, nullable=False)
    push_notifications = Column(Boolean, default=True, nullable=False)

    user = relationship("User", back_populates="follows")
    business_profile = relationship("BusinessProfile", back_populates="followers")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def enabled_channels(self) -> list:
        """Enabled channels, always in email/sms/push order."""
        channels = []
        if self.email_notifications:
            channels.append(NotificationChannel.EMAIL)
        if self.sms_notifications:
            channels.append(NotificationChannel.SMS)
        if self.push_notifications:
            channels.append(NotificationChannel.PUSH)
        return channels

    def __repr__(self):
        return f"<UserFollow user={self.user_id} profile={self.business_profile_id}>"
