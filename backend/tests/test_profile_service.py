"""
Business profile lifecycle tests.
"""

import pytest

from app.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.models import BusinessProfile, Notification, SocialNetwork, UserFollow, UserType
from app.services.notification_service import NotificationService
from app.services.profile_service import ProfileService, check_coordinate_pair
from app.slugs import slugify


class AlwaysFails:
    def send(self, notification):
        raise ConnectionError("gateway unreachable")


class Succeeds:
    def send(self, notification):
        return True


@pytest.fixture
def profiles(db):
    notifications = NotificationService(db, strategies={"email": Succeeds(), "sms": Succeeds(), "push": Succeeds()})
    return ProfileService(db, notifications=notifications)


class TestSlugs:
    """Test slug generation."""

    @pytest.mark.parametrize("name,slug", [
        ("Green Grocer", "green-grocer"),
        ("Café & Bar", "cafe-bar"),
        ("  Multiple   Spaces  ", "multiple-spaces"),
        ("under_score", "under-score"),
        ("!!!", "profile"),
    ])
    def test_slugify(self, name, slug):
        assert slugify(name) == slug

    def test_category_slug_follows_name(self, db, make_category):
        category = make_category("Health Care")
        assert category.slug == "health-care"

        category.name = "Wellness & Spa"
        db.commit()

        assert category.slug == "wellness-spa"

    def test_colliding_names_get_suffixes(self, profiles, make_user):
        owners = [make_user(user_type=UserType.BUSINESS.value) for _ in range(3)]

        slugs = [profiles.create_profile(owner, {"name": "Green Grocer"}).slug for owner in owners]

        assert slugs == ["green-grocer", "green-grocer-2", "green-grocer-3"]


class TestCreate:
    """Test profile creation rules."""

    def test_create_profile(self, db, profiles, business_user, make_category):
        food = make_category("Food")

        profile = profiles.create_profile(business_user, {
            "name": "Green Grocer",
            "description": "Fresh produce",
            "latitude": -34.6,
            "longitude": -58.4,
            "category_ids": [food.id],
        })

        assert profile.user_id == business_user.id
        assert profile.is_active is True
        assert [c.id for c in profile.categories] == [food.id]
        assert db.query(BusinessProfile).count() == 1

    def test_end_user_cannot_create(self, db, profiles, end_user):
        with pytest.raises(AuthorizationError):
            profiles.create_profile(end_user, {"name": "Not Allowed"})
        assert db.query(BusinessProfile).count() == 0

    def test_one_profile_per_business_user(self, profiles, business_user):
        profiles.create_profile(business_user, {"name": "First"})

        with pytest.raises(ConflictError):
            profiles.create_profile(business_user, {"name": "Second"})

    @pytest.mark.parametrize("coordinates", [
        {"latitude": -34.6},
        {"longitude": -58.4},
        {"latitude": -34.6, "longitude": None},
    ])
    def test_coordinates_come_in_pairs(self, db, profiles, business_user, coordinates):
        with pytest.raises(ValidationError):
            profiles.create_profile(business_user, {"name": "Half Located", **coordinates})
        assert db.query(BusinessProfile).count() == 0

    def test_check_coordinate_pair_names_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            check_coordinate_pair(10.0, None)
        assert list(exc_info.value.errors) == ["longitude"]
        check_coordinate_pair(None, None)
        check_coordinate_pair(0.0, 0.0)

    def test_unknown_category(self, db, profiles, business_user):
        with pytest.raises(ValidationError) as exc_info:
            profiles.create_profile(business_user, {"name": "Shop", "category_ids": ["no-such-category"]})

        assert "category_ids" in exc_info.value.errors
        assert db.query(BusinessProfile).count() == 0


class TestUpdate:
    """Test partial updates and their notifications."""

    def test_partial_update_keeps_other_fields(self, profiles, business_user):
        profile = profiles.create_profile(business_user, {"name": "Shop", "phone": "555-1234"})

        updated = profiles.update_profile(business_user, profile.id, {"description": "Now open Sundays"})

        assert updated.description == "Now open Sundays"
        assert updated.phone == "555-1234"
        assert updated.slug == "shop"

    def test_rename_regenerates_slug(self, profiles, business_user):
        profile = profiles.create_profile(business_user, {"name": "Shop"})

        updated = profiles.update_profile(business_user, profile.id, {"name": "New Name"})

        assert updated.slug == "new-name"

    def test_same_name_keeps_slug(self, profiles, business_user):
        profile = profiles.create_profile(business_user, {"name": "Shop"})

        assert profiles.update_profile(business_user, profile.id, {"name": "Shop"}).slug == "shop"

    def test_coordinates_merge_with_stored_values(self, profiles, business_user):
        profile = profiles.create_profile(business_user, {"name": "Shop", "latitude": 1.0, "longitude": 2.0})

        updated = profiles.update_profile(business_user, profile.id, {"latitude": 3.0})
        assert (updated.latitude, updated.longitude) == (3.0, 2.0)

        with pytest.raises(ValidationError):
            profiles.update_profile(business_user, profile.id, {"longitude": None})

    def test_categories_are_replaced(self, profiles, business_user, make_category):
        food, drinks = make_category("Food"), make_category("Drinks")
        profile = profiles.create_profile(business_user, {"name": "Shop", "category_ids": [food.id]})

        updated = profiles.update_profile(business_user, profile.id, {"category_ids": [drinks.id]})
        assert [c.id for c in updated.categories] == [drinks.id]

        cleared = profiles.update_profile(business_user, profile.id, {"category_ids": []})
        assert cleared.categories == []

    def test_only_owner_can_update(self, profiles, business_user, make_user):
        profile = profiles.create_profile(business_user, {"name": "Shop"})
        intruder = make_user(user_type=UserType.BUSINESS.value)

        with pytest.raises(AuthorizationError):
            profiles.update_profile(intruder, profile.id, {"name": "Hijacked"})

    def test_missing_profile(self, profiles, business_user):
        with pytest.raises(NotFoundError):
            profiles.update_profile(business_user, "missing", {"name": "Nope"})

    def test_update_notifies_followers(self, db, profiles, business_user, make_user, make_follow):
        profile = profiles.create_profile(business_user, {"name": "Shop"})
        make_follow(make_user(), profile, email=True, sms=False, push=True)

        profiles.update_profile(business_user, profile.id, {"description": "New menu"})

        notifications = db.query(Notification).all()
        assert len(notifications) == 2
        assert all(n.subject == "Update on: Shop" for n in notifications)
        assert all(n.is_sent() for n in notifications)

    def test_update_succeeds_when_every_delivery_fails(self, db, business_user, make_user, make_follow):
        failing = NotificationService(db, strategies={"email": AlwaysFails(), "sms": AlwaysFails(),
                                                      "push": AlwaysFails()})
        service = ProfileService(db, notifications=failing)
        profile = service.create_profile(business_user, {"name": "Shop"})
        for _ in range(3):
            make_follow(make_user(), profile, email=True, sms=True, push=True)

        updated = service.update_profile(business_user, profile.id, {"description": "Still saved"})

        assert updated.description == "Still saved"
        notifications = db.query(Notification).all()
        assert len(notifications) == 9
        assert all(n.failure_reason == "gateway unreachable" for n in notifications)


class TestDeleteAndToggle:
    """Test removal, visibility toggle and stats."""

    def test_delete_removes_dependents(self, db, profiles, business_user, make_user, make_follow):
        profile = profiles.create_profile(business_user, {"name": "Shop"})
        make_follow(make_user(), profile)
        db.add(SocialNetwork(business_profile_id=profile.id, platform="facebook", url="https://facebook.com/shop"))
        db.commit()

        assert profiles.delete_profile(business_user, profile.id) is True

        assert db.query(BusinessProfile).count() == 0
        assert db.query(UserFollow).count() == 0
        assert db.query(SocialNetwork).count() == 0

    def test_only_owner_can_delete(self, db, profiles, business_user, make_user):
        profile = profiles.create_profile(business_user, {"name": "Shop"})

        with pytest.raises(AuthorizationError):
            profiles.delete_profile(make_user(user_type=UserType.BUSINESS.value), profile.id)
        assert db.query(BusinessProfile).count() == 1

    def test_toggle_status_hides_from_slug_lookup(self, profiles, business_user):
        profile = profiles.create_profile(business_user, {"name": "Shop"})

        assert profiles.toggle_status(business_user, profile.id).is_active is False
        with pytest.raises(NotFoundError):
            profiles.get_by_slug("shop")

        assert profiles.toggle_status(business_user, profile.id).is_active is True
        assert profiles.get_by_slug("shop").id == profile.id

    def test_profile_stats(self, db, profiles, business_user, make_user, make_follow, make_category):
        profile = profiles.create_profile(business_user, {
            "name": "Shop",
            "category_ids": [make_category("Food").id, make_category("Drinks").id],
        })
        make_follow(make_user(), profile)
        db.add_all([
            SocialNetwork(business_profile_id=profile.id, platform="facebook", url="https://facebook.com/shop"),
            SocialNetwork(business_profile_id=profile.id, platform="tiktok", url="https://tiktok.com/@shop",
                          is_active=False),
        ])
        db.commit()

        assert profiles.profile_stats(profile) == {
            "followers_count": 1,
            "categories_count": 2,
            "social_networks_count": 1,
        }
