"""
Notification dispatcher: fans profile lifecycle events out to followers.

One pending Notification is written per follower and enabled channel, then
handed to the delivery strategy registered for that channel. Delivery
outcomes are recorded on the row and never propagate to the caller.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx
from sqlalchemy.orm import Session, selectinload

from ..config import get_settings
from ..database import atomic
from ..exceptions import DeliveryError, ValidationError
from ..models import BusinessProfile, Notification, NotificationChannel, NotificationStatus, UserFollow
from .follow_service import FollowService
from .pagination import paginate_query

logger = logging.getLogger(__name__)
settings = get_settings()

PROFILE_ACTIONS = ("created", "updated", "deleted")

SUBJECT_TEMPLATES = {
    "created": "New profile: {name}",
    "updated": "Update on: {name}",
    "deleted": "Profile removed: {name}",
}

MESSAGE_TEMPLATES = {
    "created": "{name} has registered in the directory. Take a look!",
    "updated": "{name} has updated its information. Check the news.",
    "deleted": "{name} is no longer available in the directory.",
}

UNSUPPORTED_CHANNEL = "unsupported channel"
STRATEGY_FAILED = "delivery strategy reported failure"


class DeliveryStrategy:
    """Sends one notification over one channel. Returns True on success."""

    def send(self, notification: Notification) -> bool:
        raise NotImplementedError


class LoggingDeliveryStrategy(DeliveryStrategy):
    """Records the message in the application log."""

    def __init__(self, channel: NotificationChannel):
        self.channel = channel

    def send(self, notification: Notification) -> bool:
        user = notification.user
        if self.channel == NotificationChannel.EMAIL:
            recipient = user.email
        elif self.channel == NotificationChannel.SMS:
            recipient = user.phone
        else:
            recipient = f"user {user.id}"
        logger.info(f"{self.channel.value} sent to {recipient}: {notification.subject}")
        return True


class WebhookDeliveryStrategy(DeliveryStrategy):
    """POSTs the notification as JSON to an HTTP endpoint."""

    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    def send(self, notification: Notification) -> bool:
        payload = {
            "id": notification.id,
            "channel": notification.channel,
            "user_id": notification.user_id,
            "business_profile_id": notification.business_profile_id,
            "subject": notification.subject,
            "message": notification.message,
            "metadata": notification.meta or {},
        }

        try:
            with httpx.Client() as client:
                response = client.post(self.url, json=payload, timeout=self.timeout)
        except httpx.TimeoutException:
            raise DeliveryError("Webhook timeout")
        except httpx.HTTPError as e:
            raise DeliveryError(f"Webhook error: {e}")

        if response.status_code in (200, 201, 202, 204):
            return True

        logger.warning(f"Webhook rejected notification {notification.id}: {response.status_code}")
        return False


def default_strategies() -> Dict[str, DeliveryStrategy]:
    """One strategy per channel, webhook-backed when a URL is configured."""
    if settings.notification_webhook_url:
        webhook = WebhookDeliveryStrategy(settings.notification_webhook_url, settings.http_timeout_seconds)
        return {channel.value: webhook for channel in NotificationChannel}
    return {channel.value: LoggingDeliveryStrategy(channel) for channel in NotificationChannel}


class NotificationService:
    """
    Creates and delivers follower notifications.

    Writes are flushed into the caller's transaction; profile mutations and
    their notifications commit or roll back together.
    """

    def __init__(
        self,
        db: Session,
        strategies: Optional[Mapping[str, DeliveryStrategy]] = None,
        deliver_inline: Optional[bool] = None,
    ):
        self.db = db
        self.strategies = dict(strategies) if strategies is not None else default_strategies()
        self.deliver_inline = settings.notifications_deliver_inline if deliver_inline is None else deliver_inline

    def notify_profile_event(self, profile: BusinessProfile, action: str) -> List[Notification]:
        """
        Create one pending notification per follower and enabled channel.

        Args:
            profile: The profile that changed
            action: "created", "updated" or "deleted"

        Returns:
            The notifications created, in follower then channel order
        """
        if action not in PROFILE_ACTIONS:
            raise ValidationError(f"Unknown profile action: {action}", {"action": ["Unknown action"]})

        subject = SUBJECT_TEMPLATES[action].format(name=profile.name)
        message = MESSAGE_TEMPLATES[action].format(name=profile.name)

        follows = (
            self.db.query(UserFollow)
            .filter(UserFollow.business_profile_id == profile.id)
            .order_by(UserFollow.created_at, UserFollow.id)
            .all()
        )

        created = []
        for follow in follows:
            for channel in follow.enabled_channels:
                notification = Notification(
                    user_id=follow.user_id,
                    business_profile_id=profile.id,
                    channel=channel.value,
                    subject=subject,
                    message=message,
                    status=NotificationStatus.PENDING.value,
                    meta={"action": action, "profile_slug": profile.slug},
                )
                self.db.add(notification)
                created.append(notification)
        self.db.flush()

        logger.info(f"Profile {profile.id} {action}: {len(created)} notifications for {len(follows)} followers")

        if self.deliver_inline:
            for notification in created:
                self.deliver(notification)

        return created

    def deliver(self, notification: Notification) -> NotificationStatus:
        """
        Attempt delivery and record the outcome on the notification.

        Non-pending notifications are returned untouched. Strategy errors are
        logged and stored as the failure reason.
        """
        if not notification.is_pending():
            return NotificationStatus(notification.status)

        strategy = self.strategies.get(notification.channel)
        if strategy is None:
            logger.error(f"No delivery strategy for channel {notification.channel} ({notification.id})")
            notification.mark_as_failed(UNSUPPORTED_CHANNEL)
        else:
            try:
                sent = strategy.send(notification)
            except Exception as e:
                logger.error(f"Error delivering notification {notification.id}: {e}")
                notification.mark_as_failed(str(e) or type(e).__name__)
            else:
                if sent:
                    notification.mark_as_sent()
                else:
                    notification.mark_as_failed(STRATEGY_FAILED)

        self.db.flush()
        return NotificationStatus(notification.status)

    def process_pending(self, limit: int = 50) -> Dict[str, int]:
        """Deliver up to `limit` pending notifications, oldest first."""
        pending = (
            self.db.query(Notification)
            .options(selectinload(Notification.user))
            .filter(Notification.status == NotificationStatus.PENDING.value)
            .order_by(Notification.created_at, Notification.id)
            .limit(limit)
            .all()
        )

        results = {"processed": 0, "sent": 0, "failed": 0}
        with atomic(self.db):
            for notification in pending:
                results["processed"] += 1
                if self.deliver(notification) == NotificationStatus.SENT:
                    results["sent"] += 1
                else:
                    results["failed"] += 1

        logger.info(f"Processed {results['processed']} pending notifications ({results['failed']} failed)")
        return results

    def user_history(self, user_id: str, page: int = 1, per_page: int = 20) -> Tuple[List[Notification], Dict[str, Any]]:
        query = (
            self.db.query(Notification)
            .options(selectinload(Notification.business_profile))
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id)
        )
        return paginate_query(query, page, per_page)

    def profile_notification_stats(self, profile_id: str) -> Dict[str, int]:
        stats = FollowService(self.db).profile_follow_stats(profile_id)
        since = datetime.utcnow() - timedelta(days=7)
        stats["recent_notifications"] = self.db.query(Notification).filter(
            Notification.business_profile_id == profile_id,
            Notification.created_at >= since,
        ).count()
        return stats
