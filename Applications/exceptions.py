from rest_framework import status
from rest_framework.exceptions import APIException


class ApplicationNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Application not found"
    default_code = "not_found"


class NotPermitted(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"
    default_code = "forbidden"


class InvalidRequest(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"
    default_code = "invalid"


class InvalidEmployee(InvalidRequest):
    default_detail = "Invalid employee selected"
    default_code = "invalid_employee"


class InvalidTransition(APIException):
    """Raised before any write when an action is not allowed from the current status."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "invalid_transition"

    def __init__(self, current_status, action):
        self.current_status = current_status
        self.action = action
        super().__init__(f"Cannot {action.replace('_', ' ')} an application in '{current_status}' status")
