"""
Centralized application configuration.
"""
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Service Directory"
    debug: bool = False
    cors_origins: str = ""  # Comma-separated, added to the local dev origins

    # Database
    database_url: str = "sqlite:///./directory.db"

    # JWT Authentication
    jwt_secret_key: str = "your-super-secret-key-change-in-production-min-32-chars"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7

    # Profile search (radius in km)
    search_default_radius_km: float = 10
    search_min_radius_km: float = 1
    search_max_radius_km: float = 50
    search_default_per_page: int = 12
    search_min_per_page: int = 6
    search_max_per_page: int = 50
    nearby_limit: int = 100

    # Notifications
    notifications_deliver_inline: bool = True  # False = leave pending for process_pending()
    notification_webhook_url: Optional[str] = None

    # Outbound HTTP (social link checks, webhook delivery)
    http_timeout_seconds: float = 10.0

    # Statistics cache
    stats_cache_ttl_seconds: int = 300

    # Map defaults (Buenos Aires)
    map_default_lat: float = -34.6037
    map_default_lng: float = -58.3816
    map_default_zoom: int = 13

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
