import logging
from dataclasses import dataclass

from django.db import DatabaseError

logger = logging.getLogger(__name__)

CHANNELS = ("email", "sms", "whatsapp")


def setting_key(channel):
    return f"notifications_{channel}_enabled"


@dataclass(frozen=True)
class NotificationSettings:
    """
    Which delivery channels are switched on.

    Built from the admin settings store once, then handed to the
    dispatcher; the dispatcher never looks settings up by string key.
    """
    email_enabled: bool = True
    sms_enabled: bool = True
    whatsapp_enabled: bool = True

    @classmethod
    def load(cls):
        from Admin.models import SystemSetting

        keys = {setting_key(channel): channel for channel in CHANNELS}
        try:
            stored = dict(
                SystemSetting.objects.filter(key__in=keys).values_list("key", "value")
            )
        except DatabaseError:
            # Unreadable settings must not silence notifications
            logger.exception("Could not read notification settings, enabling all channels")
            return cls()

        # Missing key means enabled; only the literal "false" turns a channel off
        return cls(**{
            f"{channel}_enabled": stored.get(key) != "false"
            for key, channel in keys.items()
        })

    def is_enabled(self, channel):
        return getattr(self, f"{channel}_enabled")

    def as_dict(self):
        return {channel: self.is_enabled(channel) for channel in CHANNELS}
