"""
Business logic services.
"""
from .profile_search_service import ProfileSearchService, SearchFilters
from .follow_service import FollowService, NotificationPreferences
from .notification_service import NotificationService
from .social_network_service import SocialNetworkService
from .profile_service import ProfileService
from .map_service import MapService
from .analytics_service import AnalyticsService

__all__ = [
    "ProfileSearchService",
    "SearchFilters",
    "FollowService",
    "NotificationPreferences",
    "NotificationService",
    "SocialNetworkService",
    "ProfileService",
    "MapService",
    "AnalyticsService",
]
