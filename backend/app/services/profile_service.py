"""
Business profile lifecycle: create, update, delete, toggle, lookup.

Every mutation commits together with the follower notifications it triggers.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..database import atomic
from ..exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..models import BusinessProfile, Category, SocialNetwork, User, UserFollow
from ..slugs import unique_slug
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "name", "description", "logo_path", "latitude", "longitude",
    "address", "phone", "email", "website",
)


def check_coordinate_pair(latitude: Optional[float], longitude: Optional[float]) -> None:
    """Latitude and longitude are both set or both empty."""
    if (latitude is None) != (longitude is None):
        missing = "longitude" if longitude is None else "latitude"
        raise ValidationError(
            "Latitude and longitude must be provided together",
            {missing: ["Required when the other coordinate is given"]},
        )


class ProfileService:
    """Service for business profile CRUD."""

    def __init__(self, db: Session, notifications: Optional[NotificationService] = None):
        self.db = db
        self.notifications = notifications or NotificationService(db)

    def _load_categories(self, category_ids: List[str]) -> List[Category]:
        if not category_ids:
            return []
        unique_ids = list(dict.fromkeys(category_ids))
        categories = self.db.query(Category).filter(Category.id.in_(unique_ids)).all()
        found = {c.id for c in categories}
        missing = [cid for cid in unique_ids if cid not in found]
        if missing:
            raise ValidationError(
                "Unknown categories",
                {"category_ids": [f"Category {cid} does not exist" for cid in missing]},
            )
        # Keep the caller's order
        by_id = {c.id: c for c in categories}
        return [by_id[cid] for cid in unique_ids]

    def get_profile(self, profile_id: str) -> BusinessProfile:
        profile = self.db.query(BusinessProfile).filter(BusinessProfile.id == profile_id).first()
        if not profile:
            raise NotFoundError("Business profile not found")
        return profile

    def get_owned_profile(self, user: User, profile_id: str) -> BusinessProfile:
        """Profile by id, only if `user` owns it."""
        profile = self.get_profile(profile_id)
        if profile.user_id != user.id:
            raise AuthorizationError("You can only manage your own business profile")
        return profile

    def get_by_slug(self, slug: str) -> BusinessProfile:
        profile = (
            self.db.query(BusinessProfile)
            .options(
                selectinload(BusinessProfile.categories),
                selectinload(BusinessProfile.social_networks),
            )
            .filter(BusinessProfile.slug == slug, BusinessProfile.is_active == True)  # noqa: E712
            .first()
        )
        if not profile:
            raise NotFoundError("Business profile not found")
        return profile

    def create_profile(self, user: User, data: Dict[str, Any]) -> BusinessProfile:
        """
        Create the user's profile and notify followers.

        Args:
            user: Business user who will own the profile
            data: Profile fields plus optional `category_ids`

        Raises:
            AuthorizationError: user is not a business user
            ConflictError: user already owns a profile
            ValidationError: bad coordinates or unknown categories
        """
        if not user.is_business_user():
            raise AuthorizationError("Only business users can create a business profile")

        existing = self.db.query(BusinessProfile.id).filter(BusinessProfile.user_id == user.id).first()
        if existing:
            raise ConflictError("User already has a business profile")

        data = dict(data)
        check_coordinate_pair(data.get("latitude"), data.get("longitude"))
        categories = self._load_categories(data.pop("category_ids", None) or [])

        try:
            with atomic(self.db):
                profile = BusinessProfile(
                    user_id=user.id,
                    slug=unique_slug(self.db, BusinessProfile, data["name"]),
                    **{key: value for key, value in data.items() if key in PROFILE_FIELDS},
                )
                profile.categories = categories
                self.db.add(profile)
                self.db.flush()
                self.notifications.notify_profile_event(profile, "created")
        except IntegrityError as e:
            logger.warning(f"Profile create conflict for user {user.id}: {e.orig}")
            raise ConflictError("Business profile already exists")

        self.db.refresh(profile)
        logger.info(f"Created business profile {profile.id} ({profile.slug})")
        return profile

    def update_profile(self, user: User, profile_id: str, data: Dict[str, Any]) -> BusinessProfile:
        """
        Apply a partial update; only keys present in `data` change.

        The slug is regenerated when the name changes. `category_ids`, when
        present, replaces the whole category set.
        """
        profile = self.get_owned_profile(user, profile_id)

        data = dict(data)
        latitude = data["latitude"] if "latitude" in data else profile.latitude
        longitude = data["longitude"] if "longitude" in data else profile.longitude
        check_coordinate_pair(latitude, longitude)

        categories = None
        if "category_ids" in data:
            categories = self._load_categories(data.pop("category_ids") or [])

        try:
            with atomic(self.db):
                new_name = data.get("name")
                if new_name and new_name != profile.name:
                    profile.slug = unique_slug(self.db, BusinessProfile, new_name, exclude_id=profile.id)

                for key, value in data.items():
                    if key in PROFILE_FIELDS:
                        setattr(profile, key, value)
                if categories is not None:
                    profile.categories = categories

                self.db.flush()
                self.notifications.notify_profile_event(profile, "updated")
        except IntegrityError as e:
            logger.warning(f"Profile update conflict for {profile_id}: {e.orig}")
            raise ConflictError("Business profile slug already in use")

        self.db.refresh(profile)
        logger.info(f"Updated business profile {profile.id}")
        return profile

    def delete_profile(self, user: User, profile_id: str) -> bool:
        """Notify followers, then delete the profile and everything hanging off it."""
        profile = self.get_owned_profile(user, profile_id)

        with atomic(self.db):
            self.notifications.notify_profile_event(profile, "deleted")
            self.db.delete(profile)

        logger.info(f"Deleted business profile {profile_id}")
        return True

    def toggle_status(self, user: User, profile_id: str) -> BusinessProfile:
        profile = self.get_owned_profile(user, profile_id)
        with atomic(self.db):
            profile.is_active = not profile.is_active
        self.db.refresh(profile)
        logger.info(f"Profile {profile_id} is_active={profile.is_active}")
        return profile

    def profile_stats(self, profile: BusinessProfile) -> Dict[str, int]:
        active_links = self.db.query(SocialNetwork).filter(
            SocialNetwork.business_profile_id == profile.id,
            SocialNetwork.is_active == True,  # noqa: E712
        ).count()
        return {
            "followers_count": self.db.query(UserFollow).filter(UserFollow.business_profile_id == profile.id).count(),
            "categories_count": len(profile.categories),
            "social_networks_count": active_links,
        }
