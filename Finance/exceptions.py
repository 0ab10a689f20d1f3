from rest_framework import status
from rest_framework.exceptions import APIException


class PaymentVerificationFailed(APIException):
    """The client sees one generic message; the actual reason goes to the log."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Payment verification failed"
    default_code = "payment_verification_failed"

    def __init__(self, reason=None):
        self.reason = reason
        super().__init__()


class PaymentGatewayError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment gateway error"
    default_code = "payment_gateway_error"


class PaymentNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Payment not found"
    default_code = "not_found"
