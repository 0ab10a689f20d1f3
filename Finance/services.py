"""
Payment orders for visa fees.

The tracker only deals with orders. Once a payment is verified it sends
``payment_verified`` and the Applications app takes care of submitting.
"""
import io
import logging
import secrets
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from Applications import services as lifecycle
from Applications.exceptions import InvalidRequest, NotPermitted
from Notifications import whatsapp
from Notifications.dispatcher import notify
from .exceptions import PaymentVerificationFailed
from .gateway import get_gateway
from .models import PaymentOrder
from .signals import payment_verified

logger = logging.getLogger(__name__)


def _check_owner(application, actor):
    if application.customer_id != actor.id:
        raise NotPermitted()


def create_payment_order(application, actor, gateway=None):
    """
    Start paying for a draft application.

    Without a configured gateway the application is submitted straight
    away and ``payment_required`` is False in the result.
    """
    _check_owner(application, actor)
    if application.status != "draft":
        raise InvalidRequest("Application is not in draft status")

    visa_type = application.visa_type
    country = application.country
    gateway = gateway or get_gateway()

    if gateway is None:
        logger.info("Payment gateway not configured, submitting %s without payment", application.application_number)
        application = lifecycle.submit_application(
            application,
            actor,
            comments="Application submitted without payment (payment gateway not configured)",
        )
        return {
            "message": "Application submitted successfully",
            "payment_required": False,
            "application_number": application.application_number,
        }

    currency = getattr(settings, "PAYMENT_CURRENCY", "INR")
    order = gateway.create_order(
        visa_type.fee,
        currency,
        receipt=f"visa_{secrets.token_hex(4)}",
        notes={
            "application_id": str(application.id),
            "customer_id": str(actor.id),
            "visa_type": visa_type.name,
            "country": country.name,
        },
    )

    PaymentOrder.objects.create(
        application=application,
        external_order_id=order["id"],
        amount=visa_type.fee,
        currency=currency,
        status="created",
    )

    return {
        "order_id": order["id"],
        "amount": order.get("amount"),
        "currency": order.get("currency", currency),
        "key": gateway.key_id,
        "application_number": application.application_number,
        "visa_type": visa_type.name,
        "country": country.name,
        "payment_required": True,
    }


def verify_payment(application, actor, external_payment_id, signature, external_order_id=None, gateway=None):
    """
    Check the checkout signature and mark the order paid.

    Every failure raises PaymentVerificationFailed and leaves the order as
    it was; the specific reason is only logged.
    """
    _check_owner(application, actor)

    def fail(reason):
        logger.warning("Payment verification failed for %s: %s", application.application_number, reason)
        return PaymentVerificationFailed(reason)

    gateway = gateway or get_gateway()
    if gateway is None:
        raise fail("payment gateway not configured")

    with transaction.atomic():
        orders = PaymentOrder.objects.select_for_update().filter(application=application)
        if external_order_id:
            orders = orders.filter(external_order_id=external_order_id)
        order = orders.order_by("-created_at").first()

        if order is None:
            raise fail(f"no payment order {external_order_id or ''}".strip())
        if order.status != "created":
            raise fail(f"order {order.external_order_id} is already {order.status}")
        if not gateway.verify_signature(order.external_order_id, external_payment_id, signature):
            raise fail(f"signature mismatch for order {order.external_order_id}")

        order.status = "paid"
        order.external_payment_id = external_payment_id
        order.verified_at = timezone.now()
        order.save(update_fields=["status", "external_payment_id", "verified_at", "updated_at"])

    logger.info("Payment %s verified for %s", order.external_order_id, application.application_number)

    payment_verified.send(sender=PaymentOrder, order=order, application=application, user=actor)
    notify_payment_received(order)
    return order


def notify_payment_received(order):
    application = order.application
    customer = application.customer

    return notify(
        customer.id,
        "email",
        "Payment Received",
        f"We have received your payment of {order.amount} {order.currency} for application "
        f"{application.application_number}. Receipt number: {order.external_order_id}.",
        application_id=application.id,
        whatsapp_text=whatsapp.payment_received(
            customer.get_full_name, order.amount, order.currency, application.application_number
        ),
    )


def visible_payments(user):
    qs = PaymentOrder.objects.select_related(
        "application", "application__customer", "application__country", "application__visa_type"
    )
    if user.is_admin:
        return qs
    if user.is_customer:
        return qs.filter(application__customer=user)
    return qs.none()


def build_receipt(order):
    application = order.application
    customer = application.customer
    return {
        "receipt_number": order.external_order_id,
        "payment_id": order.external_payment_id,
        "application_number": application.application_number,
        "customer_name": customer.get_full_name,
        "customer_email": customer.email,
        "country": application.country.name,
        "country_flag": application.country.flag_emoji,
        "visa_type": application.visa_type.name,
        "amount": str(order.amount),
        "currency": order.currency,
        "status": order.status,
        "payment_date": order.verified_at or order.created_at,
        "generated_at": timezone.now(),
    }


def render_receipt_pdf(receipt):
    """One-page A4 receipt; returns the PDF bytes."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    c.setFont("Helvetica-Bold", 18)
    c.drawString(60, height - 80, "Payment Receipt")

    rows = [
        ("Receipt Number", receipt["receipt_number"]),
        ("Payment ID", receipt["payment_id"] or "-"),
        ("Application Number", receipt["application_number"]),
        ("Customer", f"{receipt['customer_name']} ({receipt['customer_email']})"),
        ("Country", receipt["country"]),
        ("Visa Type", receipt["visa_type"]),
        ("Amount", f"{receipt['amount']} {receipt['currency']}"),
        ("Status", receipt["status"].title()),
        ("Payment Date", f"{receipt['payment_date']:%Y-%m-%d %H:%M}"),
    ]

    y = height - 130
    for label, value in rows:
        c.setFont("Helvetica-Bold", 11)
        c.drawString(60, y, f"{label}:")
        c.setFont("Helvetica", 11)
        c.drawString(200, y, str(value))
        y -= 22

    c.setFont("Helvetica-Oblique", 9)
    c.drawString(60, 60, f"Generated {receipt['generated_at']:%Y-%m-%d %H:%M} UTC")

    c.showPage()
    c.save()
    return buffer.getvalue()
