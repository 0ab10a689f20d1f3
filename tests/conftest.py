"""
Shared fixtures: one user per role, a destination with a paid visa type,
and a draft application owned by the customer.

Outbound gateways are switched off for every test; tests that need one
pass a fake in or patch ``requests``.
"""
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from Applications.models import Country, VisaType, VisaApplication
from Notifications.config import NotificationSettings
from Notifications.dispatcher import NotificationDispatcher

User = get_user_model()


@pytest.fixture(autouse=True)
def no_outbound_gateways(settings):
    settings.RAZORPAY_KEY_ID = ""
    settings.RAZORPAY_KEY_SECRET = ""
    settings.WHATSAPP_API_URL = ""
    settings.WHATSAPP_API_KEY = ""
    settings.WHATSAPP_CHANNEL_ID = ""
    settings.ADMIN_WHATSAPP = ""
    settings.SMS_API_URL = ""
    settings.SMS_API_KEY = ""
    settings.AUTO_ASSIGN_ON_SUBMIT = True
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"


@pytest.fixture
def customer(db):
    return User.objects.create_user(
        email="ada@example.com",
        password="s3cret-pass",
        first_name="Ada",
        last_name="Obi",
        phone="+2348000000001",
    )


@pytest.fixture
def other_customer(db):
    return User.objects.create_user(
        email="bola@example.com",
        password="s3cret-pass",
        first_name="Bola",
        last_name="Ade",
    )


@pytest.fixture
def employee(db):
    return User.objects.create_user(
        email="emeka@example.com",
        password="s3cret-pass",
        first_name="Emeka",
        last_name="Nwosu",
        user_type=User.EMPLOYEE,
    )


@pytest.fixture
def second_employee(db):
    return User.objects.create_user(
        email="funke@example.com",
        password="s3cret-pass",
        first_name="Funke",
        last_name="Bello",
        user_type=User.EMPLOYEE,
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@example.com",
        password="s3cret-pass",
        first_name="Site",
        last_name="Admin",
        user_type=User.ADMIN,
    )


@pytest.fixture
def country(db):
    return Country.objects.create(name="Canada", code="CAN", flag_emoji="🇨🇦")


@pytest.fixture
def visa_type(country):
    return VisaType.objects.create(
        country=country,
        name="Tourist",
        description="Temporary Resident Visa",
        fee=Decimal("100.00"),
        processing_time_days=30,
    )


@pytest.fixture
def application(customer, country, visa_type):
    return VisaApplication.objects.create(
        customer=customer,
        country=country,
        visa_type=visa_type,
        purpose_of_visit="Holiday",
    )


@pytest.fixture
def all_channels_on():
    return NotificationDispatcher(config=NotificationSettings())


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    """Build an APIClient authenticated with a JWT for the given user."""
    def _client(user):
        client = APIClient()
        token = RefreshToken.for_user(user).access_token
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client
    return _client
