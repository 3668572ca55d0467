"""
BusinessProfile model - a discoverable business listing in the directory.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Boolean, Float, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base
from .category import business_category


class BusinessProfile(Base):
    """Business profile owned by exactly one business user."""

    __tablename__ = "business_profiles"

    # Primary key
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Owner (exclusive 1:1)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True
    )
    user = relationship("User", back_populates="business_profile")

    # Business info
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    logo_path = Column(String(500), nullable=True)  # Storage reference, not the file

    # Location (both set or both null)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    address = Column(String(500), nullable=True)

    # Contact
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    website = Column(String(255), nullable=True)

    is_active = Column(Boolean, default=True, index=True)

    # Relationships
    categories = relationship("Category", secondary=business_category, back_populates="business_profiles")
    social_networks = relationship(
        "SocialNetwork", back_populates="business_profile", cascade="all, delete-orphan"
    )
    followers = relationship("UserFollow", back_populates="business_profile", cascade="all, delete-orphan")
    notifications = relationship(
        "Notification", back_populates="business_profile", cascade="all, delete-orphan"
    )

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Set by geo searches, never persisted
    distance = None

    def __repr__(self):
        return f"<BusinessProfile {self.name}>"
