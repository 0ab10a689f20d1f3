import logging
from django.dispatch import receiver
from Finance.signals import payment_verified
from . import state_machine as fsm
from .services import submit_application

logger = logging.getLogger(__name__)


@receiver(payment_verified)
def submit_on_payment(sender, order, application, user, **kwargs):
    """
    A verified payment submits the application it paid for.
    Already-submitted applications (e.g. a replayed verify) are left alone.
    """
    if not fsm.can(application.status, fsm.SUBMIT):
        logger.info(
            "Payment %s verified for %s in '%s' status, not submitting",
            order.external_order_id, application.application_number, application.status,
        )
        return

    submit_application(
        application,
        user,
        comments="Payment verified and application submitted",
        paid=True,
    )
