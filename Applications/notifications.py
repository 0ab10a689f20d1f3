import logging
from django.contrib.auth import get_user_model
from Notifications import whatsapp
from Notifications.dispatcher import NotificationDispatcher
from Notifications.whatsapp import WhatsAppService

logger = logging.getLogger(__name__)

User = get_user_model()


STATUS_MESSAGES = {
    "approved": "Your visa application has been approved! Please check your email for further instructions.",
    "rejected": "Your visa application has been rejected. Reason: {comments}",
    "resent": "Your visa application requires additional information. Please review and resubmit. Reason: {comments}",
}


def _country_name(application):
    return application.country.name if application.country_id else "Unknown"


def notify_application_created(application, dispatcher=None):
    dispatcher = dispatcher or NotificationDispatcher()
    customer = application.customer

    return dispatcher.notify(
        customer.id,
        "system",
        "Application Created",
        f"Your visa application {application.application_number} has been created successfully.",
        application_id=application.id,
        whatsapp_text=whatsapp.application_created(
            customer.get_full_name, application.application_number, _country_name(application)
        ),
    )


def notify_application_submitted(application, paid=False, dispatcher=None):
    dispatcher = dispatcher or NotificationDispatcher()
    customer = application.customer

    if paid:
        message = (
            "Your visa application has been submitted successfully and payment has been processed. "
            "You will receive updates on the application status."
        )
    else:
        message = "Your visa application has been submitted successfully and is now under review."

    return dispatcher.notify(
        customer.id,
        "email",
        "Application Submitted Successfully",
        message,
        application_id=application.id,
        whatsapp_text=whatsapp.application_submitted(
            customer.get_full_name, application.application_number, _country_name(application)
        ),
    )


def notify_employee_assigned(application, employee, dispatcher=None):
    dispatcher = dispatcher or NotificationDispatcher()

    return dispatcher.notify(
        employee.id,
        "email",
        "New Application Assigned",
        f"Visa application {application.application_number} has been assigned to you for review.",
        application_id=application.id,
        whatsapp_text=whatsapp.employee_assigned(
            employee.get_full_name, application.application_number, _country_name(application)
        ),
    )


def notify_admins_new_application(application, payment_status="No Payment Required", dispatcher=None):
    """
    Every active admin gets an in-app + email notice; the shared admin
    WhatsApp number gets the short alert.
    """
    dispatcher = dispatcher or NotificationDispatcher()
    customer = application.customer
    country = _country_name(application)
    assigned = application.assigned_to.get_full_name if application.assigned_to_id else "Awaiting Assignment"

    message = f"""
New visa application {application.application_number}

Customer: {customer.get_full_name} ({customer.email})
Country: {country}
Visa Type: {application.visa_type.name}
Purpose: {application.purpose_of_visit or 'Not specified'}
Submitted At: {application.submitted_at:%Y-%m-%d %H:%M}
Payment Status: {payment_status}
Assigned To: {assigned}

Please review and assign this application to an appropriate processor.
"""

    admins = User.objects.filter(user_type=User.ADMIN, status="active")
    for admin in admins:
        dispatcher.notify(
            admin.id,
            "email",
            f"New Application: {application.application_number} - {country}",
            message.strip(),
            application_id=application.id,
        )

    service = WhatsAppService()
    if dispatcher.config.whatsapp_enabled and service.is_configured:
        result = service.send_admin_message(
            whatsapp.admin_new_application(customer.get_full_name, application.application_number, country)
        )
        if not result["success"]:
            logger.warning("Admin WhatsApp alert for %s not sent: %s", application.application_number, result["error"])


def notify_status_update(application, new_status, comments=None, dispatcher=None):
    template = STATUS_MESSAGES.get(new_status)
    if template is None:
        return []

    dispatcher = dispatcher or NotificationDispatcher()
    customer = application.customer
    country = _country_name(application)

    whatsapp_text = None
    if new_status == "approved":
        whatsapp_text = whatsapp.application_approved(
            customer.get_full_name, application.application_number, country
        )
    elif new_status in ("rejected", "resent"):
        whatsapp_text = whatsapp.application_needs_attention(
            customer.get_full_name,
            application.application_number,
            country,
            comments or "Please check your dashboard for details",
        )

    return dispatcher.notify(
        customer.id,
        "email",
        "Application Status Update",
        template.format(comments=comments or "Not specified"),
        application_id=application.id,
        whatsapp_text=whatsapp_text,
    )
