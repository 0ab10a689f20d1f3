import pytest
from django.urls import reverse

from Admin.models import SystemSetting
from Applications.models import VisaApplication
from Notifications.models import Notification


@pytest.mark.django_db
class TestAuth:

    def test_register_returns_tokens_and_customer(self, api_client):
        response = api_client.post(reverse("Accounts:register"), {
            "email": "new@example.com",
            "password": "long-enough-pass",
            "first_name": "New",
            "last_name": "Person",
            "user_type": "admin",
        }, format="json")

        assert response.status_code == 201
        assert response.data["user"]["user_type"] == "customer"
        assert "access" in response.data

    def test_bad_login(self, api_client, customer):
        response = api_client.post(
            reverse("Accounts:login"), {"email": customer.email, "password": "wrong"}, format="json"
        )

        assert response.status_code == 401
        assert response.data == {"error": "Invalid credentials"}

    def test_admin_creates_employee(self, client_for, admin_user):
        response = client_for(admin_user).post(reverse("Accounts:employee-list"), {
            "email": "proc@example.com",
            "password": "long-enough-pass",
            "first_name": "Pro",
            "last_name": "Cessor",
            "role": "Senior Processor",
        }, format="json")

        assert response.status_code == 201

    def test_customer_cannot_list_employees(self, client_for, customer):
        response = client_for(customer).get(reverse("Accounts:employee-list"))

        assert response.status_code == 403
        assert response.data["error"] == "Access denied"


@pytest.mark.django_db
class TestApplicationFlow:

    def test_create_submit_approve(self, client_for, customer, employee, country, visa_type):
        as_customer = client_for(customer)

        response = as_customer.post(reverse("Applications:application-list"), {
            "country": str(country.id),
            "visa_type": str(visa_type.id),
            "purpose_of_visit": "Tourism",
            "personal_info": {"passport_number": "A7654321"},
        }, format="json")
        assert response.status_code == 201
        application_id = response.data["application"]["id"]
        assert response.data["application"]["allowed_actions"] == ["submit"]

        response = as_customer.post(reverse("Applications:application-submit", args=[application_id]), format="json")
        assert response.status_code == 200
        assert response.data["application"]["status"] == "submitted"
        assert response.data["application"]["assigned_to"] == employee.id

        response = client_for(employee).post(
            reverse("Applications:application-status", args=[application_id]),
            {"status": "approved", "comments": "Documents verified"},
            format="json",
        )
        assert response.status_code == 200
        assert response.data["application"]["status"] == "approved"

        response = as_customer.get(reverse("Applications:application-history", args=[application_id]))
        assert [row["new_status"] for row in response.data] == ["submitted", "approved"]
        assert response.data[1]["changed_by_name"] == "Emeka Nwosu"

        titles = set(Notification.objects.filter(user=customer).values_list("title", flat=True))
        assert {"Application Created", "Application Submitted Successfully", "Application Status Update"} <= titles

    def test_customer_cannot_change_status(self, client_for, application, customer):
        response = client_for(customer).post(
            reverse("Applications:application-status", args=[application.id]),
            {"status": "approved"},
            format="json",
        )

        assert response.status_code == 403
        assert response.data["error"] == "Access denied"

    def test_illegal_transition_is_400(self, client_for, application, admin_user):
        response = client_for(admin_user).post(
            reverse("Applications:application-status", args=[application.id]),
            {"status": "approved"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["code"] == "invalid_transition"
        application.refresh_from_db()
        assert application.status == "draft"

    def test_customers_only_see_their_own(self, client_for, application, other_customer):
        as_other = client_for(other_customer)

        assert as_other.get(reverse("Applications:application-list")).data["count"] == 0
        response = as_other.get(reverse("Applications:application-detail", args=[application.id]))
        assert response.status_code == 404
        assert response.data == {"error": "Application not found", "code": "not_found"}

    def test_assign_with_unknown_employee(self, client_for, application, customer, admin_user):
        client_for(customer).post(reverse("Applications:application-submit", args=[application.id]))

        response = client_for(admin_user).post(
            reverse("Applications:application-assign", args=[application.id]),
            {"employee_id": customer.id},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["error"] == "Invalid employee selected"

    def test_bulk_action_respects_visibility(self, client_for, application, customer, employee, second_employee):
        client_for(customer).post(reverse("Applications:application-submit", args=[application.id]))
        application.refresh_from_db()
        assert application.assigned_to == employee

        response = client_for(second_employee).post(
            reverse("Applications:application-bulk-action"),
            {"application_ids": [str(application.id)], "action": "approve"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["results"][0]["success"] is False
        assert VisaApplication.objects.get(pk=application.id).status == "submitted"

    def test_countries_and_visa_types_are_public(self, api_client, country, visa_type):
        countries = api_client.get(reverse("Applications:country-list"))
        visa_types = api_client.get(reverse("Applications:visa-type-list", args=[country.id]))

        assert [c["code"] for c in countries.data] == ["CAN"]
        assert [v["name"] for v in visa_types.data] == ["Tourist"]


@pytest.mark.django_db
class TestPaymentsAPI:

    def test_create_payment_without_gateway_submits(self, client_for, application, customer):
        response = client_for(customer).post(reverse("Finance:create-payment", args=[application.id]))

        assert response.status_code == 200
        assert response.data["payment_required"] is False

    def test_verify_with_bad_signature(self, settings, client_for, application, customer):
        from Finance.models import PaymentOrder

        settings.RAZORPAY_KEY_ID = "rzp_test_key"
        settings.RAZORPAY_KEY_SECRET = "test_secret"
        PaymentOrder.objects.create(application=application, external_order_id="order_1", amount="100.00")

        response = client_for(customer).post(
            reverse("Finance:verify-payment", args=[application.id]),
            {"external_payment_id": "pay_1", "signature": "forged"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["error"] == "Payment verification failed"

    def test_receipt_pdf(self, client_for, application, customer):
        from Finance.models import PaymentOrder

        order = PaymentOrder.objects.create(application=application, external_order_id="order_1", amount="100.00")

        response = client_for(customer).get(reverse("Finance:payment-receipt", args=[order.id]), {"output": "pdf"})

        assert response.status_code == 200
        assert response["Content-Type"] == "application/pdf"


@pytest.mark.django_db
class TestNotificationsAPI:

    def test_list_and_mark_read(self, client_for, customer, all_channels_on):
        all_channels_on.notify(customer.id, "system", "Hello", "Body")
        client = client_for(customer)

        response = client.get(reverse("Notifications:notification-list"), {"unread": "1"})
        assert response.data["count"] == 1
        notification_id = response.data["results"][0]["id"]

        response = client.post(reverse("Notifications:notification-read", args=[notification_id]))
        assert response.data["is_read"] is True
        assert client.get(reverse("Notifications:notification-list"), {"unread": "1"}).data["count"] == 0


@pytest.mark.django_db
class TestAdminSettingsAPI:

    def test_upsert_and_effective_channels(self, client_for, admin_user):
        client = client_for(admin_user)

        response = client.post(
            reverse("Admin:setting-list"),
            {"key": "notifications_sms_enabled", "value": "false"},
            format="json",
        )
        assert response.status_code == 201

        response = client.post(
            reverse("Admin:setting-list"),
            {"key": "notifications_sms_enabled", "value": "true"},
            format="json",
        )
        assert response.status_code == 200
        assert SystemSetting.objects.get(key="notifications_sms_enabled").value == "true"

        client.post(reverse("Admin:setting-list"), {"key": "notifications_email_enabled", "value": "false"}, format="json")
        response = client.get(reverse("Admin:notification-settings"))
        assert response.data == {"email": False, "sms": True, "whatsapp": True}

    def test_employees_cannot_manage_settings(self, client_for, employee):
        response = client_for(employee).get(reverse("Admin:setting-list"))

        assert response.status_code == 403
