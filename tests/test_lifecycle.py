import pytest
from django.core import mail

from Accounts.models import CustomerProfile, EmployeeProfile
from Applications import services
from Applications.exceptions import InvalidEmployee, InvalidRequest, InvalidTransition, NotPermitted
from Applications.models import ApplicationStatusHistory, VisaApplication
from Notifications.models import Notification


def workload(user):
    return EmployeeProfile.objects.get(user=user).workload


def submitted(application, customer):
    return services.submit_application(application, customer, comments="Application submitted")


@pytest.mark.django_db
class TestCreate:

    def test_creates_draft_and_notifies_customer(self, customer, country, visa_type):
        application = services.create_application(
            customer, country, visa_type,
            details={"purpose_of_visit": "Tourism"},
            profile={"passport_number": "A1234567", "nationality": "Nigerian"},
        )

        assert application.status == "draft"
        assert application.application_number.startswith("APP-")
        assert CustomerProfile.objects.get(user=customer).passport_number == "A1234567"
        assert Notification.objects.filter(user=customer, title="Application Created").exists()

    def test_visa_type_must_belong_to_country(self, customer, visa_type):
        from Applications.models import Country

        elsewhere = Country.objects.create(name="Germany", code="DEU")

        with pytest.raises(InvalidRequest):
            services.create_application(customer, elsewhere, visa_type)

    def test_employees_cannot_create(self, employee, country, visa_type):
        with pytest.raises(NotPermitted):
            services.create_application(employee, country, visa_type)


@pytest.mark.django_db
class TestSubmit:

    def test_submit_from_draft(self, application, customer):
        application = submitted(application, customer)

        application.refresh_from_db()
        assert application.status == "submitted"
        assert application.submitted_at is not None

        history = list(application.status_history.all())
        assert [(h.old_status, h.new_status) for h in history] == [("draft", "submitted")]
        assert history[0].changed_by == customer

    def test_second_submit_is_rejected(self, application, customer):
        submitted(application, customer)

        with pytest.raises(InvalidTransition):
            submitted(application, customer)

        assert application.status_history.count() == 1

    def test_only_the_owner_can_submit(self, application, other_customer):
        with pytest.raises(NotPermitted):
            submitted(application, other_customer)

        application.refresh_from_db()
        assert application.status == "draft"

    def test_auto_assigns_least_busy_employee(self, application, customer, employee, second_employee):
        EmployeeProfile.objects.filter(user=employee).update(workload=3)

        application = submitted(application, customer)

        assert application.assigned_to == second_employee
        assert application.status == "submitted"
        assert workload(second_employee) == 1
        assert Notification.objects.filter(user=second_employee, title="New Application Assigned").exists()

    def test_auto_assign_can_be_switched_off(self, settings, application, customer, employee):
        settings.AUTO_ASSIGN_ON_SUBMIT = False

        application = submitted(application, customer)

        assert application.assigned_to is None
        assert workload(employee) == 0

    def test_notifies_customer_and_admins(self, application, customer, admin_user):
        submitted(application, customer)

        assert Notification.objects.filter(user=customer, title="Application Submitted Successfully").exists()
        admin_notice = Notification.objects.get(user=admin_user)
        assert application.application_number in admin_notice.title
        assert "No Payment Required" in admin_notice.message
        assert {m.to[0] for m in mail.outbox} >= {customer.email, admin_user.email}


@pytest.mark.django_db
class TestUpdateStatus:

    def test_customer_cannot_update_status(self, application, customer):
        submitted(application, customer)

        with pytest.raises(NotPermitted):
            services.update_application_status(application, customer, "approved")

    def test_approve_writes_one_history_row_and_notifies(self, application, customer, employee):
        submitted(application, customer)
        Notification.objects.all().delete()
        mail.outbox.clear()

        application = services.update_application_status(application, employee, "approved", "All good")

        assert application.status == "approved"
        assert application.approved_at is not None
        assert application.reviewed_at is not None

        rows = ApplicationStatusHistory.objects.filter(application=application, new_status="approved")
        assert rows.count() == 1
        assert rows.get().changed_by == employee

        notice = Notification.objects.get(user=customer)
        assert notice.title == "Application Status Update"
        assert "approved" in notice.message
        assert [m.to for m in mail.outbox] == [[customer.email]]

    def test_admin_can_reject_with_reason(self, application, customer, admin_user):
        submitted(application, customer)

        application = services.update_application_status(application, admin_user, "rejected", "Missing bank statement")

        assert application.status == "rejected"
        assert application.rejection_reason == "Missing bank statement"

    def test_unknown_target_status(self, application, customer, employee):
        submitted(application, customer)

        with pytest.raises(InvalidRequest):
            services.update_application_status(application, employee, "submitted")

    def test_draft_cannot_be_approved(self, application, employee):
        with pytest.raises(InvalidTransition):
            services.update_application_status(application, employee, "approved")

        application.refresh_from_db()
        assert application.status == "draft"
        assert application.approved_at is None
        assert not application.status_history.exists()

    def test_approved_twice_is_rejected(self, application, customer, employee):
        submitted(application, customer)
        services.update_application_status(application, employee, "approved")

        with pytest.raises(InvalidTransition):
            services.update_application_status(application, employee, "approved")

    def test_terminal_status_releases_workload(self, application, customer, employee):
        submitted(application, customer)
        assert workload(employee) == 1

        services.update_application_status(application, employee, "rejected", "Expired passport")

        assert workload(employee) == 0

    def test_resent_application_can_be_resubmitted(self, application, customer, employee):
        submitted(application, customer)
        services.update_application_status(application, employee, "resent", "Upload a clearer photo")

        application.refresh_from_db()
        assert application.status == "resent"
        assert application.resend_reason == "Upload a clearer photo"

        application = submitted(application, customer)
        assert application.status == "submitted"
        assert list(application.status_history.values_list("new_status", flat=True)) == [
            "submitted", "resent", "submitted",
        ]


@pytest.mark.django_db
class TestAssign:

    @pytest.fixture(autouse=True)
    def manual_assignment(self, settings):
        settings.AUTO_ASSIGN_ON_SUBMIT = False

    def test_assign_moves_to_under_review(self, application, customer, employee, admin_user):
        submitted(application, customer)

        application = services.assign_application(application, admin_user, employee.id)

        assert application.status == "under_review"
        assert application.assigned_to == employee
        assert workload(employee) == 1
        last = application.status_history.last()
        assert last.comments == "Assigned to Emeka Nwosu"
        assert Notification.objects.filter(user=employee, title="New Application Assigned").exists()

    def test_reassigning_same_employee_is_a_noop(self, application, customer, employee, admin_user):
        submitted(application, customer)
        services.assign_application(application, admin_user, employee.id)

        services.assign_application(application, admin_user, employee.id)

        assert workload(employee) == 1
        assert application.status_history.filter(new_status="under_review").count() == 1

    def test_reassign_moves_workload(self, application, customer, employee, second_employee, admin_user):
        submitted(application, customer)
        services.assign_application(application, admin_user, employee.id)

        application = services.assign_application(application, admin_user, second_employee.id)

        assert application.assigned_to == second_employee
        assert workload(employee) == 0
        assert workload(second_employee) == 1

    def test_only_active_employees(self, application, customer, employee, admin_user):
        submitted(application, customer)
        employee.status = "suspended"
        employee.save()

        with pytest.raises(InvalidEmployee):
            services.assign_application(application, admin_user, employee.id)

        with pytest.raises(InvalidEmployee):
            services.assign_application(application, admin_user, customer.id)

    def test_cannot_assign_a_draft(self, application, employee, admin_user):
        with pytest.raises(InvalidTransition):
            services.assign_application(application, admin_user, employee.id)

    def test_customers_cannot_assign(self, application, customer, employee):
        with pytest.raises(NotPermitted):
            services.assign_application(application, customer, employee.id)


@pytest.mark.django_db
class TestBulkAction:

    def test_reports_each_application(self, application, customer, employee, country, visa_type):
        submitted(application, customer)
        draft = VisaApplication.objects.create(customer=customer, country=country, visa_type=visa_type)

        result = services.bulk_action(
            employee,
            [str(application.id), str(draft.id), "not-a-uuid"],
            "approve",
        )

        assert result["processed"] == 3
        assert result["succeeded"] == 1
        ok, bad_status, missing = result["results"]
        assert ok == {"id": str(application.id), "success": True, "status": "approved"}
        assert bad_status["success"] is False and "draft" in bad_status["error"]
        assert missing == {"id": "not-a-uuid", "success": False, "error": "Application not found"}

    def test_set_priority(self, application, employee):
        result = services.bulk_action(employee, [str(application.id)], "set_priority", comments="high")

        application.refresh_from_db()
        assert result["succeeded"] == 1
        assert application.priority == "high"

    def test_unknown_action(self, application, employee):
        with pytest.raises(InvalidRequest):
            services.bulk_action(employee, [str(application.id)], "delete")

    def test_customers_are_refused(self, application, customer):
        with pytest.raises(NotPermitted):
            services.bulk_action(customer, [str(application.id)], "approve")

    def test_admin_assigns_to_self(self, application, customer, admin_user):
        submitted(application, customer)

        result = services.bulk_action(admin_user, [str(application.id)], "assign_to_me")

        application.refresh_from_db()
        assert result["succeeded"] == 1
        assert application.status == "under_review"
        assert application.assigned_to == admin_user

    def test_admin_cannot_be_assigned_by_someone_else(self, application, customer, employee, admin_user):
        submitted(application, customer)

        with pytest.raises(InvalidEmployee):
            services.assign_application(application, employee, admin_user.id)
