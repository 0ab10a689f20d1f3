"""
Application lifecycle: every status change goes through here.

Each operation checks who is acting, validates the move against the
state machine, writes the new status together with its history row in
one transaction, and only then sends notifications. A notification
failure never undoes a status change.
"""
import logging
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import APIException
from Accounts.models import CustomerProfile, EmployeeProfile
from Notifications.dispatcher import NotificationDispatcher
from . import state_machine as fsm
from .exceptions import InvalidEmployee, InvalidRequest, NotPermitted
from .models import ApplicationStatusHistory, VisaApplication
from .notifications import (
    notify_admins_new_application,
    notify_application_created,
    notify_application_submitted,
    notify_employee_assigned,
    notify_status_update,
)

logger = logging.getLogger(__name__)

User = get_user_model()

BULK_ACTIONS = ("approve", "reject", "assign_to_me", "set_priority")


def record_transition(application, action, actor, comments=None, **fields):
    """
    Move ``application`` along ``action`` and append the history row.

    Raises InvalidTransition before touching the row if the move is illegal.
    Extra keyword arguments are written to the application in the same save.
    """
    old_status = application.status
    new_status = fsm.next_status(old_status, action)

    application.status = new_status
    for field, value in fields.items():
        setattr(application, field, value)
    application.save(update_fields=["status", "updated_at", *fields])

    history = ApplicationStatusHistory.objects.create(
        application=application,
        old_status=old_status,
        new_status=new_status,
        changed_by=actor,
        comments=comments,
    )
    logger.info(
        "%s: %s -> %s by %s",
        application.application_number, old_status, new_status, actor.email if actor else "system",
    )
    return history


def _locked(application):
    return (
        VisaApplication.objects
        .select_for_update(of=("self",))
        .select_related("customer", "country", "visa_type", "assigned_to")
        .get(pk=application.pk)
    )


def _adjust_workload(employee_id, delta):
    qs = EmployeeProfile.objects.filter(user_id=employee_id)
    if delta < 0:
        qs = qs.filter(workload__gt=0)
    qs.update(workload=F("workload") + delta)


def pick_available_employee():
    """Least busy active employee, oldest account first on ties."""
    return (
        User.objects
        .filter(user_type=User.EMPLOYEE, status="active", employee_profile__isnull=False)
        .order_by("employee_profile__workload", "id")
        .first()
    )


def create_application(customer, country, visa_type, details=None, profile=None, dispatcher=None):
    """Customer starts a new application in draft."""
    if not customer.is_customer:
        raise NotPermitted("Only customers can create applications")

    if not country.is_active:
        raise InvalidRequest("Invalid country selected")
    if not visa_type.is_active or visa_type.country_id != country.id:
        raise InvalidRequest("Invalid visa type selected")

    with transaction.atomic():
        application = VisaApplication.objects.create(
            customer=customer,
            country=country,
            visa_type=visa_type,
            status=fsm.DRAFT,
            **(details or {}),
        )

        if profile:
            CustomerProfile.objects.update_or_create(user=customer, defaults=profile)

    logger.info("Application %s created by %s", application.application_number, customer.email)

    notify_application_created(application, dispatcher=dispatcher)
    return application


def submit_application(application, actor, comments=None, paid=False, dispatcher=None):
    """
    Customer hands the application in (draft or resent -> submitted).

    With AUTO_ASSIGN_ON_SUBMIT the least busy employee is attached;
    the status stays "submitted" until someone picks it up via assign.
    """
    if application.customer_id != actor.id:
        raise NotPermitted()

    newly_assigned = None
    with transaction.atomic():
        application = _locked(application)
        record_transition(application, fsm.SUBMIT, actor, comments, submitted_at=timezone.now())

        if getattr(settings, "AUTO_ASSIGN_ON_SUBMIT", True) and not application.assigned_to_id:
            newly_assigned = pick_available_employee()
            if newly_assigned:
                application.assigned_to = newly_assigned
                application.save(update_fields=["assigned_to", "updated_at"])
                _adjust_workload(newly_assigned.id, +1)
                logger.info("%s auto-assigned to %s", application.application_number, newly_assigned.email)

    dispatcher = dispatcher or NotificationDispatcher()
    notify_application_submitted(application, paid=paid, dispatcher=dispatcher)
    if newly_assigned:
        notify_employee_assigned(application, newly_assigned, dispatcher=dispatcher)
    notify_admins_new_application(
        application,
        payment_status="Paid" if paid else "No Payment Required",
        dispatcher=dispatcher,
    )
    return application


def update_application_status(application, actor, new_status, comments=None, dispatcher=None):
    """
    Employee/admin decision: approved, rejected or resent (sent back to the
    customer for changes).
    """
    if not actor.is_backoffice:
        raise NotPermitted()

    action = fsm.STATUS_ACTIONS.get(new_status)
    if action is None:
        allowed = ", ".join(fsm.STATUS_ACTIONS)
        raise InvalidRequest(f"Invalid status '{new_status}'. Allowed: {allowed}")

    now = timezone.now()
    fields = {}
    if new_status == fsm.APPROVED:
        fields = {"approved_at": now, "reviewed_at": now}
    elif new_status == fsm.REJECTED:
        fields = {"rejection_reason": comments, "reviewed_at": now}
    elif new_status == fsm.RESENT:
        fields = {"resend_reason": comments}

    with transaction.atomic():
        application = _locked(application)
        record_transition(application, action, actor, comments, **fields)

        # decided applications no longer count against the assignee
        if fsm.is_terminal(application.status) and application.assigned_to_id:
            _adjust_workload(application.assigned_to_id, -1)

    notify_status_update(application, new_status, comments, dispatcher=dispatcher)
    return application


def assign_application(application, actor, employee_id, dispatcher=None):
    """
    Put an employee on the application (submitted/under_review -> under_review).
    Assigning the current assignee again is a no-op.

    The target must be an active employee, except that a back-office actor
    (admins included) may always take the application for themselves.
    """
    if not actor.is_backoffice:
        raise NotPermitted()

    assignable = [User.EMPLOYEE]
    if str(employee_id) == str(actor.id):
        assignable.append(actor.user_type)
    employee = User.objects.filter(
        pk=employee_id, user_type__in=assignable, status="active"
    ).first()
    if employee is None:
        raise InvalidEmployee()

    with transaction.atomic():
        application = _locked(application)
        previous_id = application.assigned_to_id

        if application.status == fsm.UNDER_REVIEW and previous_id == employee.id:
            return application

        record_transition(
            application,
            fsm.ASSIGN,
            actor,
            f"Assigned to {employee.get_full_name}",
            assigned_to=employee,
        )

        if previous_id != employee.id:
            _adjust_workload(employee.id, +1)
            if previous_id:
                _adjust_workload(previous_id, -1)

    if previous_id != employee.id:
        notify_employee_assigned(application, employee, dispatcher=dispatcher)
    return application


def bulk_action(actor, application_ids, action, comments=None, queryset=None, dispatcher=None):
    """
    Run one action over many applications. Each application is handled on
    its own: one failure doesn't stop the rest, and every outcome is reported.

    ``queryset`` limits which applications the actor may reach; ids outside
    it are reported as not found.
    """
    if not actor.is_backoffice:
        raise NotPermitted()
    if action not in BULK_ACTIONS:
        raise InvalidRequest("Invalid action")

    priority = None
    if action == "set_priority":
        priority = comments or "high"
        if priority not in dict(VisaApplication.PRIORITY_CHOICES):
            raise InvalidRequest(f"Invalid priority '{priority}'")

    if queryset is None:
        queryset = VisaApplication.objects.all()
    dispatcher = dispatcher or NotificationDispatcher()
    results = []

    for application_id in application_ids:
        try:
            application = queryset.get(pk=application_id)
        except (VisaApplication.DoesNotExist, ValidationError, ValueError):
            results.append({"id": str(application_id), "success": False, "error": "Application not found"})
            continue

        try:
            if action == "approve":
                application = update_application_status(
                    application, actor, fsm.APPROVED, comments, dispatcher=dispatcher
                )
            elif action == "reject":
                application = update_application_status(
                    application, actor, fsm.REJECTED, comments or "Bulk action: reject", dispatcher=dispatcher
                )
            elif action == "assign_to_me":
                application = assign_application(application, actor, actor.id, dispatcher=dispatcher)
            else:
                application.priority = priority
                application.save(update_fields=["priority", "updated_at"])
        except APIException as e:
            results.append({"id": str(application.id), "success": False, "error": str(e.detail)})
            continue

        results.append({"id": str(application.id), "success": True, "status": application.status})

    succeeded = sum(1 for r in results if r["success"])
    logger.info("Bulk %s by %s: %s/%s succeeded", action, actor.email, succeeded, len(results))
    return {"processed": len(results), "succeeded": succeeded, "results": results}
