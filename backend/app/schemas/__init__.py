"""
Pydantic schemas for request/response validation.
"""
from .common import ApiResponse, Page, Pagination, ok
from .auth import UserRegister, UserLogin, TokenRefresh, Token, UserResponse, AuthResult
from .category import CategoryResponse
from .social_network import (
    SocialNetworkCreate,
    SocialNetworkResponse,
    SocialUrlValidate,
    SocialUrlValidation,
    UrlCheckResult,
)
from .business_profile import (
    BusinessProfileCreate,
    BusinessProfileUpdate,
    BusinessProfileResponse,
    BusinessProfileDetail,
    ProfileStats,
)
from .follow import (
    NotificationPreferencesSchema,
    FollowRequest,
    FollowResponse,
    FollowStatus,
    FollowedProfile,
    UserFollowStats,
)
from .notification import NotificationResponse
from .map import MapMarker, MapMarkers, MapConfig

__all__ = [
    "ApiResponse", "Page", "Pagination", "ok",
    "UserRegister", "UserLogin", "TokenRefresh", "Token", "UserResponse", "AuthResult",
    "CategoryResponse",
    "SocialNetworkCreate", "SocialNetworkResponse", "SocialUrlValidate", "SocialUrlValidation", "UrlCheckResult",
    "BusinessProfileCreate", "BusinessProfileUpdate", "BusinessProfileResponse", "BusinessProfileDetail",
    "ProfileStats",
    "NotificationPreferencesSchema", "FollowRequest", "FollowResponse", "FollowStatus", "FollowedProfile",
    "UserFollowStats",
    "NotificationResponse",
    "MapMarker", "MapMarkers", "MapConfig",
]
