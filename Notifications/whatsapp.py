"""
WhatsApp notifications through the third-party messaging gateway, plus the
message templates used across the portal.
"""
import requests
import logging
from django.conf import settings

logger = logging.getLogger(__name__)


class WhatsAppService:
    """
    The gateway takes everything in the query string:
    ``?APIkey=..&channelId=..&mobile=..&messageText=..``
    """

    def __init__(self, api_url=None, api_key=None, channel_id=None, timeout=None):
        self.api_url = api_url if api_url is not None else getattr(settings, 'WHATSAPP_API_URL', '')
        self.api_key = api_key if api_key is not None else getattr(settings, 'WHATSAPP_API_KEY', '')
        self.channel_id = channel_id if channel_id is not None else getattr(settings, 'WHATSAPP_CHANNEL_ID', '')
        self.timeout = timeout or getattr(settings, 'OUTBOUND_HTTP_TIMEOUT', 30)

    @property
    def is_configured(self):
        return bool(self.api_url and self.api_key and self.channel_id)

    def send_message(self, phone_number, message):
        if not self.is_configured:
            logger.error("WhatsApp gateway not configured")
            return {'success': False, 'error': 'WhatsApp gateway not configured'}

        params = {
            'APIkey': self.api_key,
            'channelId': self.channel_id,
            'mobile': phone_number,
            'messageText': message,
        }

        try:
            response = requests.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"WhatsApp notification to {phone_number} failed: {str(e)}")
            return {'success': False, 'error': str(e)}

        logger.info(f"WhatsApp sent to {phone_number}: {response.text}")
        return {'success': True, 'message': 'WhatsApp notification sent', 'response': response.text}

    def send_admin_message(self, message):
        admin_number = getattr(settings, 'ADMIN_WHATSAPP', '')
        if not admin_number:
            return {'success': False, 'error': 'Admin WhatsApp number not configured'}
        return self.send_message(admin_number, message)


# ---------------------------------------------------------------------------
# Message templates
# ---------------------------------------------------------------------------

def welcome(user_name):
    return (
        f"🎉 Welcome to VisaPortal, {user_name}! Your account has been created successfully. "
        "Start your visa application journey today!"
    )


def application_created(user_name, application_number, country):
    return (
        f"📋 New Application Created!\n\nHi {user_name},\n"
        f"Your visa application {application_number} for {country} has been created successfully.\n\n"
        "Track your application status in your dashboard."
    )


def application_submitted(user_name, application_number, country):
    return (
        f"✅ Application Submitted!\n\nHi {user_name},\n"
        f"Your visa application {application_number} for {country} has been submitted and is now under review.\n\n"
        "We'll keep you updated on the progress."
    )


def application_approved(user_name, application_number, country):
    return (
        f"🎉 Visa Approved!\n\nCongratulations {user_name}!\n"
        f"Your visa application {application_number} for {country} has been APPROVED!\n\n"
        "Check your email for further instructions."
    )


def application_needs_attention(user_name, application_number, country, reason):
    return (
        f"❌ Application Update\n\nHi {user_name},\n"
        f"Your visa application {application_number} for {country} requires attention.\n\n"
        f"Reason: {reason}\n\nPlease check your dashboard for details."
    )


def payment_received(user_name, amount, currency, application_number):
    return (
        f"💳 Payment Confirmed!\n\nHi {user_name},\n"
        f"We've received your payment of {amount} {currency} for application {application_number}.\n\n"
        "Your application is now being processed."
    )


def admin_new_application(customer_name, application_number, country):
    return (
        f"🆕 New Application Alert!\n\nCustomer: {customer_name}\n"
        f"Application: {application_number}\nCountry: {country}\n\n"
        "Please review and assign to a processor."
    )


def employee_assigned(employee_name, application_number, country):
    return (
        f"📋 New Assignment!\n\nHi {employee_name},\n"
        f"Application {application_number} for {country} has been assigned to you.\n\n"
        "Please review and process accordingly."
    )
