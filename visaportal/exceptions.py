import logging

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Render every API error as {"error": "..."}.

    Classified errors (APIException, Http404, PermissionDenied) keep their
    status code. Anything else is logged with its traceback and turned into
    a generic 500 so internals never leak to the client.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "view", exc_info=exc)
        return Response(
            {"error": "Internal server error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        response.data = {"error": "Invalid request", "fields": response.data}
        return response

    if isinstance(exc, Http404):
        response.data = {"error": "Not found"}
        return response

    data = {"error": _message(response.data)}
    if isinstance(exc, APIException):
        data["code"] = exc.get_codes() if isinstance(exc.detail, str) else exc.default_code
    response.data = data
    return response


def _message(data):
    if isinstance(data, dict) and "detail" in data:
        return str(data["detail"])
    return str(data)
