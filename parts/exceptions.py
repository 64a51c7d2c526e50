"""REST exception handler shared by the API."""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from parts.services.errors import (
    InvalidInput,
    PartNotFound,
    PartsUsageError,
    PersistFailed,
    TicketNotFound,
)

logger = logging.getLogger(__name__)

USAGE_ERROR_STATUS = {
    InvalidInput: 400,
    PartNotFound: 404,
    TicketNotFound: 404,
    PersistFailed: 409,
}


def usage_error_response(exc: PartsUsageError) -> Response:
    status = next(
        (code for cls, code in USAGE_ERROR_STATUS.items() if isinstance(exc, cls)),
        500,
    )
    data = {"code": exc.code, "detail": exc.message, "status_code": status}
    if isinstance(exc, PersistFailed):
        data["reason"] = exc.reason
    if status >= 500:
        logger.error("Unhandled parts usage error: %s", exc)
    return Response(data, status=status)


def custom_exception_handler(exc, context):
    """Turn domain and Django errors into JSON responses with ``status_code``.

    Anything else follows DRF's default handling.
    """
    if isinstance(exc, PartsUsageError):
        return usage_error_response(exc)

    if isinstance(exc, DjangoValidationError):
        exc = DRFValidationError(detail=exc.messages)

    if isinstance(exc, ProtectedError):
        blocking = sorted(
            {str(obj._meta.verbose_name_plural) for obj in exc.protected_objects}
        )
        detail = "Cannot delete: still referenced by " + ", ".join(blocking) + "."
        logger.warning("Delete refused: %s", exc.args[0])
        return Response(
            {"code": "in_use", "detail": detail, "status_code": 409}, status=409
        )

    if isinstance(exc, Http404):
        return Response({"detail": "Not found.", "status_code": 404}, status=404)

    response = exception_handler(exc, context)
    if response is not None and isinstance(response.data, dict):
        response.data["status_code"] = response.status_code
    return response
