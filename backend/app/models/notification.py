"""
Notification model - append-only history of messages sent to followers.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship

from ..database import Base
from ..exceptions import InvalidOperationError


class NotificationChannel(str, Enum):
    """Delivery channels a follower can toggle."""
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class NotificationStatus(str, Enum):
    """pending -> sent | failed; sent and failed are terminal."""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class Notification(Base):
    """One message for one follower on one channel."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    business_profile_id = Column(
        String(36), ForeignKey("business_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )

    channel = Column(String(10), nullable=False)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(10), nullable=False, default=NotificationStatus.PENDING.value, index=True)
    sent_at = Column(DateTime, nullable=True)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)

    user = relationship("User", back_populates="notifications")
    business_profile = relationship("BusinessProfile", back_populates="notifications")

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def is_pending(self) -> bool:
        return self.status == NotificationStatus.PENDING.value

    def is_sent(self) -> bool:
        return self.status == NotificationStatus.SENT.value

    def is_failed(self) -> bool:
        return self.status == NotificationStatus.FAILED.value

    def _ensure_pending(self):
        if not self.is_pending():
            raise InvalidOperationError(f"Notification {self.id} is already {self.status}")

    def mark_as_sent(self):
        self._ensure_pending()
        self.status = NotificationStatus.SENT.value
        self.sent_at = datetime.utcnow()

    def mark_as_failed(self, reason: str = None):
        self._ensure_pending()
        meta = dict(self.meta or {})
        if reason:
            meta["failure_reason"] = reason
        self.status = NotificationStatus.FAILED.value
        self.meta = meta

    @property
    def failure_reason(self):
        return (self.meta or {}).get("failure_reason")

    def __repr__(self):
        return f"<Notification {self.channel} {self.status} user={self.user_id}>"
