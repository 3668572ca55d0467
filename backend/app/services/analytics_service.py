"""
System-wide statistics, memoized for a few minutes.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import (
    BusinessProfile,
    Category,
    Notification,
    NotificationStatus,
    User,
    UserFollow,
    UserType,
    business_category,
)
from .cache_service import TTLCache

logger = logging.getLogger(__name__)
settings = get_settings()

SYSTEM_STATS_KEY = "system_stats"


class AnalyticsService:
    """Aggregate counts over users, profiles, follows and notifications."""

    def __init__(self, db: Session, cache: Optional[TTLCache] = None):
        self.db = db
        self.cache = cache if cache is not None else get_stats_cache()

    def system_stats(self) -> Dict[str, Any]:
        return self.cache.get_or_set(SYSTEM_STATS_KEY, self._compute_system_stats)

    def _compute_system_stats(self) -> Dict[str, Any]:
        return {
            "users": self._user_stats(),
            "profiles": self._profile_stats(),
            "notifications": self._notification_stats(),
            "generated_at": datetime.utcnow().isoformat(),
        }

    def _user_stats(self) -> Dict[str, int]:
        day_ago = datetime.utcnow() - timedelta(days=1)
        return {
            "total": self.db.query(User).count(),
            "active": self.db.query(User).filter(User.is_active == True).count(),  # noqa: E712
            "business_users": self.db.query(User).filter(User.user_type == UserType.BUSINESS.value).count(),
            "end_users": self.db.query(User).filter(User.user_type == UserType.END_USER.value).count(),
            "registered_last_24_hours": self.db.query(User).filter(User.created_at >= day_ago).count(),
        }

    def _profile_stats(self) -> Dict[str, Any]:
        total = self.db.query(BusinessProfile).count()
        follows = self.db.query(UserFollow).count()

        by_category = (
            self.db.query(Category.name, func.count(business_category.c.business_profile_id))
            .join(business_category, business_category.c.category_id == Category.id)
            .group_by(Category.name)
            .order_by(func.count(business_category.c.business_profile_id).desc(), Category.name)
            .limit(10)
            .all()
        )

        return {
            "total": total,
            "active": self.db.query(BusinessProfile).filter(BusinessProfile.is_active == True).count(),  # noqa: E712
            "with_coordinates": self.db.query(BusinessProfile).filter(
                BusinessProfile.latitude.isnot(None), BusinessProfile.longitude.isnot(None)
            ).count(),
            "with_social_networks": self.db.query(BusinessProfile).filter(
                BusinessProfile.social_networks.any()
            ).count(),
            "by_category": {name: count for name, count in by_category},
            "total_follows": follows,
            "avg_followers": round(follows / max(total, 1), 2),
        }

    def _notification_stats(self) -> Dict[str, Any]:
        by_status = dict(
            self.db.query(Notification.status, func.count(Notification.id)).group_by(Notification.status).all()
        )
        by_channel = dict(
            self.db.query(Notification.channel, func.count(Notification.id)).group_by(Notification.channel).all()
        )
        sent = by_status.get(NotificationStatus.SENT.value, 0)
        failed = by_status.get(NotificationStatus.FAILED.value, 0)
        attempted = sent + failed

        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "by_channel": by_channel,
            "delivery_rate": round(sent / attempted * 100, 2) if attempted else 0.0,
        }


# Singleton instance
_stats_cache: Optional[TTLCache] = None


def get_stats_cache() -> TTLCache:
    """Get the process-wide stats cache."""
    global _stats_cache
    if _stats_cache is None:
        _stats_cache = TTLCache(settings.stats_cache_ttl_seconds)
    return _stats_cache
