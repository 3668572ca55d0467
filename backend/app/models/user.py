"""
User model for authentication and roles.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from ..database import Base


class UserType(str, Enum):
    """Account roles."""
    BUSINESS = "business"  # Owns a business profile
    END_USER = "end_user"  # Searches and follows profiles


class User(Base):
    """User model for authentication and role-based access."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Auth info
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Profile info
    name = Column(String(255), nullable=True)
    user_type = Column(String(20), nullable=False, default=UserType.END_USER.value)
    phone = Column(String(20), nullable=True)

    # Account status
    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    business_profile = relationship(
        "BusinessProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    follows = relationship("UserFollow", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    def is_business_user(self) -> bool:
        return self.user_type == UserType.BUSINESS.value

    def is_end_user(self) -> bool:
        return self.user_type == UserType.END_USER.value

    def __repr__(self):
        return f"<User {self.email}>"
