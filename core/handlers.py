# backend/core/handlers.py
import logging
import traceback

from django.conf import settings
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import CMSError

logger = logging.getLogger(__name__)


def _debug_detail(exc):
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def api_exception_handler(exc, context):
    """
    Wrap every API error in the {"success": false, "message": ...} envelope
    the admin panel and public frontend expect.
    """
    response = exception_handler(exc, context)
    view = context.get("view")

    if response is None:
        logger.exception(
            "Unhandled error in %s",
            view.__class__.__name__ if view else "view",
            exc_info=exc,
        )
        body = {"success": False, "message": "Internal server error"}
        if settings.DEBUG:
            body["detail"] = _debug_detail(exc)
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    data = response.data
    body = {"success": False}

    if isinstance(exc, CMSError):
        body["message"] = str(exc.detail)
        if exc.field:
            body["errors"] = {exc.field: [str(exc.detail)]}
    elif isinstance(exc, exceptions.ValidationError):
        body["message"] = "Invalid input."
        body["errors"] = data if isinstance(data, dict) else {"non_field_errors": data}
    elif isinstance(data, dict) and "detail" in data:
        body["message"] = str(data["detail"])
    else:
        body["message"] = str(data)

    if response.status_code >= 500:
        logger.error(
            "%s failed: %s",
            view.__class__.__name__ if view else "view",
            body["message"],
        )
        if settings.DEBUG:
            body["detail"] = _debug_detail(exc)

    response.data = body
    return response
