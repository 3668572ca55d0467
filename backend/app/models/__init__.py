"""
SQLAlchemy models for the service directory.
"""
from .user import User, UserType
from .category import Category, business_category
from .business_profile import BusinessProfile
from .social_network import SocialNetwork, SocialPlatform
from .notification import Notification, NotificationChannel, NotificationStatus
from .user_follow import UserFollow

__all__ = [
    "User",
    "UserType",
    "Category",
    "business_category",
    "BusinessProfile",
    "SocialNetwork",
    "SocialPlatform",
    "Notification",
    "NotificationChannel",
    "NotificationStatus",
    "UserFollow",
]
