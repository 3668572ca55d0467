"""
Follow registry: which end users follow which profiles, and on what channels.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..database import atomic
from ..exceptions import AuthorizationError, InvalidOperationError, NotFoundError
from ..models import BusinessProfile, NotificationChannel, User, UserFollow
from .pagination import paginate_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationPreferences:
    """Independent per-channel toggles for one follow."""
    email: bool = True
    sms: bool = False
    push: bool = True

    @property
    def channels(self) -> FrozenSet[NotificationChannel]:
        enabled = set()
        if self.email:
            enabled.add(NotificationChannel.EMAIL)
        if self.sms:
            enabled.add(NotificationChannel.SMS)
        if self.push:
            enabled.add(NotificationChannel.PUSH)
        return frozenset(enabled)

    @classmethod
    def from_follow(cls, follow: UserFollow) -> "NotificationPreferences":
        return cls(
            email=bool(follow.email_notifications),
            sms=bool(follow.sms_notifications),
            push=bool(follow.push_notifications),
        )

    def apply_to(self, follow: UserFollow) -> None:
        follow.email_notifications = self.email
        follow.sms_notifications = self.sms
        follow.push_notifications = self.push

    def as_dict(self) -> Dict[str, bool]:
        return {"email": self.email, "sms": self.sms, "push": self.push}


class FollowService:
    """Service for follow/unfollow and notification preferences."""

    def __init__(self, db: Session):
        self.db = db

    def _get_follow(self, user_id: str, profile_id: str) -> Optional[UserFollow]:
        return self.db.query(UserFollow).filter(
            UserFollow.user_id == user_id,
            UserFollow.business_profile_id == profile_id,
        ).first()

    def follow(
        self,
        user: User,
        profile_id: str,
        preferences: Optional[NotificationPreferences] = None,
    ) -> UserFollow:
        """
        Follow a profile, or update preferences if already following.

        Raises:
            AuthorizationError: user is not an end user
            NotFoundError: profile does not exist
            InvalidOperationError: profile is inactive
        """
        if not user.is_end_user():
            raise AuthorizationError("Only end users can follow business profiles")

        profile = self.db.query(BusinessProfile).filter(BusinessProfile.id == profile_id).first()
        if not profile:
            raise NotFoundError("Business profile not found")
        if not profile.is_active:
            raise InvalidOperationError("Cannot follow an inactive profile")

        preferences = preferences or NotificationPreferences()

        with atomic(self.db):
            follow = self._get_follow(user.id, profile_id)
            if follow is None:
                follow = UserFollow(user_id=user.id, business_profile_id=profile_id)
                preferences.apply_to(follow)
                try:
                    with self.db.begin_nested():
                        self.db.add(follow)
                except IntegrityError:
                    # Another request inserted the same pair first
                    logger.info(f"Follow race for user {user.id} on profile {profile_id}, updating instead")
                    follow = self._get_follow(user.id, profile_id)
                    if follow is None:
                        # Foreign key failure: the profile went away
                        raise NotFoundError("Business profile not found")
                    preferences.apply_to(follow)
            else:
                preferences.apply_to(follow)

        self.db.refresh(follow)
        logger.info(f"User {user.id} follows profile {profile_id} ({sorted(c.value for c in preferences.channels)})")
        return follow

    def unfollow(self, user_id: str, profile_id: str) -> bool:
        """Hard-delete the follow. False when there was nothing to delete."""
        follow = self._get_follow(user_id, profile_id)
        if not follow:
            return False

        with atomic(self.db):
            self.db.delete(follow)

        logger.info(f"User {user_id} unfollowed profile {profile_id}")
        return True

    def update_preferences(self, user_id: str, profile_id: str, preferences: NotificationPreferences) -> bool:
        follow = self._get_follow(user_id, profile_id)
        if not follow:
            raise NotFoundError("User does not follow this profile")

        with atomic(self.db):
            preferences.apply_to(follow)
        return True

    def get_preferences(self, user_id: str, profile_id: str) -> Optional[NotificationPreferences]:
        follow = self._get_follow(user_id, profile_id)
        if not follow:
            return None
        return NotificationPreferences.from_follow(follow)

    def is_following(self, user_id: str, profile_id: str) -> bool:
        return self._get_follow(user_id, profile_id) is not None

    def list_followed_profiles(
        self, user_id: str, page: int = 1, per_page: int = 20
    ) -> Tuple[List[UserFollow], Dict[str, Any]]:
        """Follows of a user (newest first) with their profiles loaded."""
        query = (
            self.db.query(UserFollow)
            .options(
                joinedload(UserFollow.business_profile).selectinload(BusinessProfile.categories),
                joinedload(UserFollow.business_profile).selectinload(BusinessProfile.social_networks),
            )
            .filter(UserFollow.user_id == user_id)
            .order_by(UserFollow.created_at.desc(), UserFollow.id)
        )
        return paginate_query(query, page, per_page)

    def list_followers(
        self, profile_id: str, page: int = 1, per_page: int = 20
    ) -> Tuple[List[UserFollow], Dict[str, Any]]:
        """Follows of a profile with their users loaded."""
        query = (
            self.db.query(UserFollow)
            .options(selectinload(UserFollow.user))
            .filter(UserFollow.business_profile_id == profile_id)
            .order_by(UserFollow.created_at, UserFollow.id)
        )
        return paginate_query(query, page, per_page)

    def update_all_preferences_for_user(self, user_id: str, preferences: NotificationPreferences) -> bool:
        """Overwrite the preferences of every follow the user has."""
        with atomic(self.db):
            updated = self.db.query(UserFollow).filter(UserFollow.user_id == user_id).update(
                {
                    UserFollow.email_notifications: preferences.email,
                    UserFollow.sms_notifications: preferences.sms,
                    UserFollow.push_notifications: preferences.push,
                },
                synchronize_session="fetch",
            )

        logger.info(f"Global preferences applied to {updated} follows of user {user_id}")
        return True

    def _channel_counts(self, column, value: str) -> Dict[str, int]:
        row = self.db.query(
            func.count(UserFollow.id),
            func.count(UserFollow.id).filter(UserFollow.email_notifications == True),  # noqa: E712
            func.count(UserFollow.id).filter(UserFollow.sms_notifications == True),  # noqa: E712
            func.count(UserFollow.id).filter(UserFollow.push_notifications == True),  # noqa: E712
        ).filter(column == value).one()
        return {"total": row[0], "email": row[1], "sms": row[2], "push": row[3]}

    def user_follow_stats(self, user_id: str) -> Dict[str, int]:
        counts = self._channel_counts(UserFollow.user_id, user_id)
        return {
            "total_following": counts["total"],
            "with_email_notifications": counts["email"],
            "with_sms_notifications": counts["sms"],
            "with_push_notifications": counts["push"],
        }

    def profile_follow_stats(self, profile_id: str) -> Dict[str, int]:
        counts = self._channel_counts(UserFollow.business_profile_id, profile_id)
        return {
            "total_followers": counts["total"],
            "email_followers": counts["email"],
            "sms_followers": counts["sms"],
            "push_followers": counts["push"],
        }
