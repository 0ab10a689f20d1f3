"""
SMS delivery through an HTTP SMS gateway.
"""
import requests
import logging
from django.conf import settings

logger = logging.getLogger(__name__)


class SMSService:
    """Thin client for a JSON SMS gateway (api key + sender id)."""

    def __init__(self, api_url=None, api_key=None, sender_id=None, timeout=None):
        self.api_url = api_url if api_url is not None else getattr(settings, 'SMS_API_URL', '')
        self.api_key = api_key if api_key is not None else getattr(settings, 'SMS_API_KEY', '')
        self.sender_id = sender_id or getattr(settings, 'SMS_SENDER_ID', 'VisaPortal')
        self.timeout = timeout or getattr(settings, 'OUTBOUND_HTTP_TIMEOUT', 30)

    @property
    def is_configured(self):
        return bool(self.api_url and self.api_key)

    def send_sms(self, phone_number, message):
        """
        Send one SMS.

        Args:
            phone_number (str): Recipient in international format
            message (str): Message body

        Returns:
            dict: {'success': bool, 'error'?: str, 'response'?: dict}
        """
        if not self.is_configured:
            logger.error("SMS gateway not configured")
            return {'success': False, 'error': 'SMS gateway not configured'}

        phone_number = self.clean_phone_number(phone_number)
        if not phone_number:
            return {'success': False, 'error': 'No phone number'}

        payload = {
            'api_key': self.api_key,
            'to': phone_number,
            'from': self.sender_id,
            'sms': message,
            'type': 'plain',
        }

        try:
            response = requests.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"SMS request failed to {phone_number}: {str(e)}")
            return {'success': False, 'error': f'Request failed: {str(e)}'}

        if response.ok:
            logger.info(f"SMS sent successfully to {phone_number}")
            return {'success': True, 'response': response.text}

        logger.error(f"SMS failed to {phone_number}: HTTP {response.status_code} {response.text}")
        return {
            'success': False,
            'error': f'Gateway returned HTTP {response.status_code}',
            'response': response.text,
        }

    @staticmethod
    def clean_phone_number(phone_number):
        """Strip spaces and punctuation, keep a leading + if present."""
        if not phone_number:
            return ''
        digits_only = ''.join(filter(str.isdigit, phone_number))
        if not digits_only:
            return ''
        return f"+{digits_only}" if phone_number.strip().startswith('+') else digits_only
