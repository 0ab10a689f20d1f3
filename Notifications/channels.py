from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import escape

from .sms_service import SMSService
from .whatsapp import WhatsAppService


class EmailChannel:
    name = "email"

    def applies_to(self, notification, user, whatsapp_text):
        return notification.type in ("email", "system")

    def is_configured(self):
        return True

    def send(self, notification, user, whatsapp_text=None):
        if not user.email:
            return {"success": False, "error": "User has no email address"}

        send_mail(
            notification.title,
            notification.message,
            settings.DEFAULT_FROM_EMAIL,
            [user.email],
            html_message=f"<p>{escape(notification.message)}</p>",
            fail_silently=False,
        )
        return {"success": True}


class SMSChannel:
    name = "sms"

    def __init__(self, service=None):
        self.service = service or SMSService()

    def applies_to(self, notification, user, whatsapp_text):
        return notification.type == "sms"

    def is_configured(self):
        return self.service.is_configured

    def send(self, notification, user, whatsapp_text=None):
        if not user.phone:
            return {"success": False, "error": "User has no phone number"}
        return self.service.send_sms(user.phone, f"{notification.title}: {notification.message}")


class WhatsAppChannel:
    name = "whatsapp"

    def __init__(self, service=None):
        self.service = service or WhatsAppService()

    def applies_to(self, notification, user, whatsapp_text):
        return bool(whatsapp_text and user.phone)

    def is_configured(self):
        return self.service.is_configured

    def send(self, notification, user, whatsapp_text=None):
        return self.service.send_message(user.phone, whatsapp_text)


def default_channels():
    return [EmailChannel(), SMSChannel(), WhatsAppChannel()]
