"""
Best-effort, multi-channel notification delivery.

``notify`` always stores an in-app Notification first and then tries every
applicable channel independently. A failing channel is logged and reported
in the returned results; it never raises to the caller and never stops the
other channels.
"""
import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model

from .channels import default_channels
from .config import NotificationSettings
from .models import Notification

logger = logging.getLogger(__name__)

User = get_user_model()

SUCCESS = "success"
FAILURE = "failure"
SKIPPED = "skipped"


@dataclass(frozen=True)
class ChannelResult:
    channel: str
    outcome: str
    reason: str = ""

    @property
    def ok(self):
        return self.outcome == SUCCESS

    def as_dict(self):
        return {"channel": self.channel, "outcome": self.outcome, "reason": self.reason}


class NotificationDispatcher:
    """
    Args:
        config: NotificationSettings; loaded from the settings store when omitted.
        channels: iterable of channel objects (see Notifications.channels).
        retry_queue: optional object with ``enqueue(notification, channel, reason)``;
            failed sends are handed to it. Nothing ships one yet.
    """

    def __init__(self, config=None, channels=None, retry_queue=None):
        self.config = config if config is not None else NotificationSettings.load()
        self.channels = list(channels) if channels is not None else default_channels()
        self.retry_queue = retry_queue

    def notify(self, user_id, notification_type, title, message, application_id=None, whatsapp_text=None):
        user = User.objects.filter(pk=user_id).first()

        notification = Notification.objects.create(
            user=user,
            recipient_id=str(user_id),
            application_id=application_id,
            type=notification_type,
            title=title,
            message=message,
        )

        if user is None:
            logger.warning("Notification %s stored but user %s not found, nothing delivered", notification.pk, user_id)
            return []

        results = [
            self._deliver(channel, notification, user, whatsapp_text)
            for channel in self.channels
            if channel.applies_to(notification, user, whatsapp_text)
        ]

        logger.info("Notification logged for user %s: %s", user_id, title)
        return results

    def _deliver(self, channel, notification, user, whatsapp_text):
        if not self.config.is_enabled(channel.name):
            logger.info("%s notification skipped (disabled): %s", channel.name, notification.title)
            return ChannelResult(channel.name, SKIPPED, "disabled")

        if not channel.is_configured():
            logger.info("%s notification skipped (not configured): %s", channel.name, notification.title)
            return ChannelResult(channel.name, SKIPPED, "not configured")

        try:
            outcome = channel.send(notification, user, whatsapp_text)
        except Exception as e:
            logger.exception("%s sending failed for notification %s", channel.name, notification.pk)
            return self._failed(channel, notification, str(e) or e.__class__.__name__)

        if not outcome.get("success"):
            reason = outcome.get("error", "unknown error")
            logger.error("%s sending failed for notification %s: %s", channel.name, notification.pk, reason)
            return self._failed(channel, notification, reason)

        logger.info("%s sent to user %s: %s", channel.name, user.pk, notification.title)
        return ChannelResult(channel.name, SUCCESS)

    def _failed(self, channel, notification, reason):
        if self.retry_queue is not None:
            try:
                self.retry_queue.enqueue(notification, channel.name, reason)
            except Exception:
                logger.exception("Could not enqueue %s retry for notification %s", channel.name, notification.pk)
        return ChannelResult(channel.name, FAILURE, reason)


def notify(user_id, notification_type, title, message, application_id=None, whatsapp_text=None, dispatcher=None):
    """Shortcut used by the apps; builds a dispatcher with fresh settings when none is given."""
    dispatcher = dispatcher or NotificationDispatcher()
    return dispatcher.notify(
        user_id,
        notification_type,
        title,
        message,
        application_id=application_id,
        whatsapp_text=whatsapp_text,
    )
