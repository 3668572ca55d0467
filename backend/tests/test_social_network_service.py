"""
Social link tests: platform validators, upsert, removal and reachability.
"""

from unittest.mock import Mock, patch

import httpx
import pytest
from sqlalchemy import text

from app.exceptions import NotFoundError, ValidationError
from app.models import SocialNetwork
from app.services.social_network_service import (
    GENERIC_VALIDATOR,
    PatternUrlValidator,
    SocialNetworkService,
)


@pytest.fixture
def social(db):
    return SocialNetworkService(db)


class TestValidators:
    """Test per-platform URL rules."""

    @pytest.mark.parametrize("platform,url", [
        ("facebook", "https://www.facebook.com/greengrocer"),
        ("facebook", "http://facebook.com/green.grocer/"),
        ("instagram", "https://instagram.com/green_grocer"),
        ("twitter", "https://twitter.com/greengrocer"),
        ("twitter", "https://x.com/greengrocer"),
        ("linkedin", "https://www.linkedin.com/company/green-grocer"),
        ("linkedin", "https://linkedin.com/in/jane-doe/"),
        ("youtube", "https://www.youtube.com/channel/UC123abc"),
        ("youtube", "https://youtube.com/c/GreenGrocer"),
        ("youtube", "https://youtube.com/GreenGrocer"),
        ("tiktok", "https://www.tiktok.com/@greengrocer"),
        ("whatsapp", "https://wa.me/5491100000000"),
        ("whatsapp", "https://api.whatsapp.com/5491100000000?text=hi"),
        ("facebook", "HTTPS://WWW.FACEBOOK.COM/GreenGrocer"),
    ])
    def test_valid_urls(self, social, platform, url):
        assert social.is_valid(platform, url)

    @pytest.mark.parametrize("platform,url", [
        ("facebook", "https://www.fakebook.com/greengrocer"),
        ("facebook", "https://facebook.com/"),
        ("facebook", "https://facebook.com/green grocer"),
        ("instagram", "https://facebook.com/greengrocer"),
        ("twitter", "ftp://twitter.com/greengrocer"),
        ("linkedin", "https://linkedin.com/greengrocer"),
        ("tiktok", "https://tiktok.com/greengrocer"),
        ("whatsapp", "https://wa.me/call-me"),
        ("youtube", "https://youtube.com.evil.example/GreenGrocer"),
    ])
    def test_invalid_urls(self, social, platform, url):
        assert not social.is_valid(platform, url)

    def test_unknown_platform_uses_generic_check(self, social):
        assert social.is_valid("mastodon", "https://mastodon.social/@greengrocer")
        assert not social.is_valid("mastodon", "mastodon.social/@greengrocer")
        assert not social.is_valid("mastodon", "javascript:alert(1)")

    def test_generic_validator(self):
        assert GENERIC_VALIDATOR.is_valid("http://example.com")
        assert not GENERIC_VALIDATOR.is_valid("https://")
        assert not GENERIC_VALIDATOR.is_valid("https://exa mple.com")

    def test_supported_platforms(self, social):
        assert set(social.supported_platforms()) == {
            "facebook", "instagram", "twitter", "linkedin", "youtube", "tiktok", "whatsapp",
        }

    def test_custom_validators(self, db):
        service = SocialNetworkService(db, validators={"mastodon": PatternUrlValidator(r"https://[\w.]+/@\w+")})

        assert service.supported_platforms() == ["mastodon"]
        assert service.is_valid("mastodon", "https://mastodon.social/@grocer")
        assert not service.is_valid("mastodon", "https://mastodon.social/grocer")


class TestAttach:
    """Test attach, upsert, remove and toggle."""

    def test_attach_creates_link(self, db, social, make_profile):
        profile = make_profile()

        link = social.attach(profile, "instagram", "https://instagram.com/grocer")

        assert link.id is not None
        assert link.is_active is True
        assert db.query(SocialNetwork).count() == 1

    def test_attach_same_platform_replaces_url(self, db, social, make_profile):
        profile = make_profile()
        first = social.attach(profile, "instagram", "https://instagram.com/old_name")
        social.toggle(first)

        second = social.attach(profile, "instagram", "https://instagram.com/new_name")

        assert second.id == first.id
        assert second.url == "https://instagram.com/new_name"
        assert second.is_active is True
        assert db.query(SocialNetwork).filter(SocialNetwork.business_profile_id == profile.id).count() == 1

    def test_platforms_are_independent(self, db, social, make_profile):
        profile = make_profile()

        social.attach(profile, "instagram", "https://instagram.com/grocer")
        social.attach(profile, "tiktok", "https://tiktok.com/@grocer")

        assert db.query(SocialNetwork).count() == 2

    def test_unsupported_platform(self, db, social, make_profile):
        with pytest.raises(ValidationError) as exc_info:
            social.attach(make_profile(), "myspace", "https://myspace.com/grocer")

        assert "platform" in exc_info.value.errors
        assert db.query(SocialNetwork).count() == 0

    def test_invalid_url(self, db, social, make_profile):
        with pytest.raises(ValidationError) as exc_info:
            social.attach(make_profile(), "facebook", "https://example.com/grocer")

        assert exc_info.value.errors == {"url": ["Not a valid facebook URL"]}
        assert db.query(SocialNetwork).count() == 0

    def test_profile_deleted_before_insert(self, db, social, make_profile, monkeypatch):
        profile = make_profile()

        original_get = SocialNetworkService._get_link
        calls = {"count": 0}

        def profile_vanishes(self, profile_id, platform):
            calls["count"] += 1
            if calls["count"] == 1:
                self.db.execute(text("DELETE FROM business_profiles WHERE id = :id"), {"id": profile_id})
                return None
            return original_get(self, profile_id, platform)

        monkeypatch.setattr(SocialNetworkService, "_get_link", profile_vanishes)

        with pytest.raises(NotFoundError):
            social.attach(profile, "facebook", "https://facebook.com/grocer")
        assert db.query(SocialNetwork).count() == 0

    def test_remove(self, db, social, make_profile):
        profile = make_profile()
        social.attach(profile, "facebook", "https://facebook.com/grocer")

        assert social.remove(profile, "facebook") is True
        assert social.remove(profile, "facebook") is False
        assert db.query(SocialNetwork).count() == 0

    def test_toggle(self, social, make_profile):
        link = social.attach(make_profile(), "facebook", "https://facebook.com/grocer")

        assert social.toggle(link).is_active is False
        assert social.toggle(link).is_active is True


class TestReachability:
    """Test URL checks and verification."""

    def test_accessible_url(self, social):
        with patch("app.services.social_network_service.httpx.Client") as client_cls:
            client = client_cls.return_value.__enter__.return_value
            client.head.return_value = Mock(is_success=True)

            assert social.check_url_accessibility("https://facebook.com/grocer") is True

        client_cls.assert_called_once_with(follow_redirects=True)

    def test_error_status_is_inaccessible(self, social):
        with patch("app.services.social_network_service.httpx.Client") as client_cls:
            client_cls.return_value.__enter__.return_value.head.return_value = Mock(is_success=False)

            assert social.check_url_accessibility("https://facebook.com/gone") is False

    @pytest.mark.parametrize("error", [
        httpx.ConnectTimeout("timed out"),
        httpx.ConnectError("refused"),
    ])
    def test_transport_errors_are_inaccessible(self, social, error):
        with patch("app.services.social_network_service.httpx.Client") as client_cls:
            client_cls.return_value.__enter__.return_value.head.side_effect = error

            assert social.check_url_accessibility("https://facebook.com/grocer") is False

    def test_verify_deactivates_unreachable_links(self, db, social, make_profile, monkeypatch):
        profile = make_profile()
        social.attach(profile, "facebook", "https://facebook.com/grocer")
        social.attach(profile, "instagram", "https://instagram.com/gone")

        monkeypatch.setattr(social, "check_url_accessibility", lambda url: "gone" not in url)

        results = social.verify_urls(profile)

        assert [(r["platform"], r["is_accessible"]) for r in results] == [
            ("facebook", True),
            ("instagram", False),
        ]
        assert all(r["last_checked"] is not None for r in results)
        active = {
            link.platform: link.is_active
            for link in db.query(SocialNetwork).filter(SocialNetwork.business_profile_id == profile.id)
        }
        assert active == {"facebook": True, "instagram": False}
