"""
Social network links: per-platform URL validation, upsert and reachability checks.
"""
import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import atomic
from ..exceptions import NotFoundError, ValidationError
from ..models import BusinessProfile, SocialNetwork, SocialPlatform

logger = logging.getLogger(__name__)
settings = get_settings()


class UrlValidator:
    """Answers whether a URL is acceptable for one platform."""

    def is_valid(self, url: str) -> bool:
        raise NotImplementedError


class PatternUrlValidator(UrlValidator):
    """Validator backed by a case-insensitive regex that must match the whole URL."""

    def __init__(self, pattern: str):
        self.pattern = re.compile(pattern, re.IGNORECASE | re.ASCII)

    def is_valid(self, url: str) -> bool:
        return self.pattern.fullmatch(url) is not None


class GenericUrlValidator(UrlValidator):
    """Any absolute http(s) URL with a host."""

    def is_valid(self, url: str) -> bool:
        try:
            parsed = urlparse(url)
        except ValueError:
            return False
        return parsed.scheme in ("http", "https") and bool(parsed.netloc) and " " not in url


PLATFORM_VALIDATORS: Dict[str, UrlValidator] = {
    SocialPlatform.FACEBOOK.value: PatternUrlValidator(r"https?://(www\.)?facebook\.com/[\w.\-]+/?"),
    SocialPlatform.INSTAGRAM.value: PatternUrlValidator(r"https?://(www\.)?instagram\.com/[\w.\-]+/?"),
    SocialPlatform.TWITTER.value: PatternUrlValidator(r"https?://(www\.)?(twitter\.com|x\.com)/[\w.\-]+/?"),
    SocialPlatform.LINKEDIN.value: PatternUrlValidator(r"https?://(www\.)?linkedin\.com/(in|company)/[\w.\-]+/?"),
    SocialPlatform.YOUTUBE.value: PatternUrlValidator(
        r"https?://(www\.)?youtube\.com/(channel/|c/|user/)?[\w.\-]+/?"
    ),
    SocialPlatform.TIKTOK.value: PatternUrlValidator(r"https?://(www\.)?tiktok\.com/@[\w.\-]+/?"),
    SocialPlatform.WHATSAPP.value: PatternUrlValidator(r"https?://(wa\.me|api\.whatsapp\.com)/[\d+]+(\?.*)?"),
}

GENERIC_VALIDATOR = GenericUrlValidator()


class SocialNetworkService:
    """Service for a profile's social network links."""

    def __init__(self, db: Session, validators: Optional[Dict[str, UrlValidator]] = None):
        self.db = db
        self.validators = validators if validators is not None else PLATFORM_VALIDATORS
        self.timeout = settings.http_timeout_seconds

    def supported_platforms(self) -> List[str]:
        return list(self.validators.keys())

    def is_valid(self, platform: str, url: str) -> bool:
        """Unknown platforms fall back to a generic URL check."""
        validator = self.validators.get(platform, GENERIC_VALIDATOR)
        return validator.is_valid(url)

    def _get_link(self, profile_id: str, platform: str) -> Optional[SocialNetwork]:
        return self.db.query(SocialNetwork).filter(
            SocialNetwork.business_profile_id == profile_id,
            SocialNetwork.platform == platform,
        ).first()

    def attach(self, profile: BusinessProfile, platform: str, url: str) -> SocialNetwork:
        """
        Create or replace the profile's link for a platform.

        An existing link for the same platform gets the new URL and is
        reactivated.

        Raises:
            ValidationError: unsupported platform or URL not valid for it
        """
        if platform not in self.validators:
            raise ValidationError(
                f"Unsupported platform: {platform}",
                {"platform": [f"Must be one of: {', '.join(self.supported_platforms())}"]},
            )
        if not self.is_valid(platform, url):
            raise ValidationError(
                f"Invalid URL for platform {platform}: {url}",
                {"url": [f"Not a valid {platform} URL"]},
            )

        with atomic(self.db):
            link = self._get_link(profile.id, platform)
            if link is None:
                link = SocialNetwork(business_profile_id=profile.id, platform=platform, url=url, is_active=True)
                try:
                    with self.db.begin_nested():
                        self.db.add(link)
                except IntegrityError:
                    logger.info(f"Concurrent {platform} link for profile {profile.id}, updating instead")
                    link = self._get_link(profile.id, platform)
                    if link is None:
                        raise NotFoundError("Business profile not found")
                    link.url = url
                    link.is_active = True
            else:
                link.url = url
                link.is_active = True

        self.db.refresh(link)
        logger.info(f"Attached {platform} link to profile {profile.id}")
        return link

    def remove(self, profile: BusinessProfile, platform: str) -> bool:
        with atomic(self.db):
            deleted = self.db.query(SocialNetwork).filter(
                SocialNetwork.business_profile_id == profile.id,
                SocialNetwork.platform == platform,
            ).delete(synchronize_session="fetch")
        return deleted > 0

    def toggle(self, link: SocialNetwork) -> SocialNetwork:
        with atomic(self.db):
            link.is_active = not link.is_active
        self.db.refresh(link)
        return link

    def check_url_accessibility(self, url: str) -> bool:
        """HEAD the URL; timeouts and transport errors count as not accessible."""
        try:
            with httpx.Client(follow_redirects=True) as client:
                response = client.head(url, timeout=self.timeout)
            return response.is_success
        except httpx.TimeoutException:
            logger.warning(f"Timeout checking URL: {url}")
            return False
        except httpx.HTTPError as e:
            logger.warning(f"Error checking URL {url}: {e}")
            return False

    def verify_urls(self, profile: BusinessProfile) -> List[Dict[str, Any]]:
        """Check every link of the profile and deactivate the unreachable ones."""
        links = (
            self.db.query(SocialNetwork)
            .filter(SocialNetwork.business_profile_id == profile.id)
            .order_by(SocialNetwork.platform)
            .all()
        )

        results = []
        with atomic(self.db):
            for link in links:
                is_accessible = self.check_url_accessibility(link.url)
                results.append({
                    "platform": link.platform,
                    "url": link.url,
                    "is_accessible": is_accessible,
                    "last_checked": datetime.utcnow(),
                })
                if not is_accessible:
                    link.is_active = False

        return results
