"""
SocialNetwork model - a profile's link on one social platform.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..database import Base


class SocialPlatform(str, Enum):
    """Supported social platforms."""
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    WHATSAPP = "whatsapp"


class SocialNetwork(Base):
    """At most one row per (profile, platform)."""

    __tablename__ = "social_networks"
    __table_args__ = (
        UniqueConstraint("business_profile_id", "platform", name="uq_social_network_profile_platform"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    business_profile_id = Column(
        String(36), ForeignKey("business_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    platform = Column(String(20), nullable=False)
    url = Column(String(500), nullable=False)
    is_active = Column(Boolean, default=True)

    business_profile = relationship("BusinessProfile", back_populates="social_networks")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<SocialNetwork {self.platform} {self.url}>"
