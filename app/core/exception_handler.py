"""
DRF exception handler and response helpers for domain errors.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Errors derived from
core.exceptions.BaseApplicationError are rendered with their to_dict() body
and their http_status, so each failure reaches the operator with its specific
reason instead of a generic 500.

service_failure_response renders a failed ServiceResult the same way.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Render BaseApplicationError subclasses, defer everything else to DRF."""
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'view'}",
            extra={"error_code": exc.error_code, "details": exc.details},
        )
        return Response(exc.to_dict(), status=exc.http_status)

    return exception_handler(exc, context)


def service_failure_response(result) -> Response:
    """
    Render a failed ServiceResult.

    Results whose error_code ends in NOT_FOUND are 404, everything else 400.

    Example:
        result = MerchantService.approve_application(application_id, admin_id)
        if not result.success:
            return service_failure_response(result)
    """
    body = {"error": result.error, "error_code": result.error_code}
    if result.errors:
        body["errors"] = result.errors
    if result.error_code and result.error_code.endswith("NOT_FOUND"):
        return Response(body, status=status.HTTP_404_NOT_FOUND)
    return Response(body, status=status.HTTP_400_BAD_REQUEST)
