"""Maps domain errors and DRF exceptions onto ``{message, errors?}`` bodies."""

from __future__ import annotations

import logging

from django.core.exceptions import NON_FIELD_ERRORS
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ..exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    MarketplaceError,
    NotFoundError,
    TransientError,
    ValidationError,
)
from .payload import camel_case

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (TransientError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def field_errors(errors: dict) -> dict:
    """Form field names in the camelCase the JSON contract uses."""
    return {
        "nonFieldErrors" if field in (NON_FIELD_ERRORS, "non_field_errors") else camel_case(str(field)): messages
        for field, messages in errors.items()
    }


def error_body(message: str, errors=None) -> dict:
    body = {"message": message}
    if errors:
        body["errors"] = field_errors(errors)
    return body


def _status_for(exc: MarketplaceError) -> int:
    for error_class, code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return code
    return status.HTTP_400_BAD_REQUEST


def envelope_exception_handler(exc, context):
    if isinstance(exc, MarketplaceError):
        code = _status_for(exc)
        if isinstance(exc, AuthorizationError):
            request = context.get("request")
            logger.warning("Authorization refused for %s: %s", getattr(request, "path", "-"), exc.detail)
        return Response(error_body(exc.message, exc.errors), status=code)

    if isinstance(exc, Http404):
        exc = drf_exceptions.NotFound(NotFoundError.default_message)
    elif isinstance(exc, drf_exceptions.PermissionDenied):
        exc = drf_exceptions.PermissionDenied(AuthorizationError.default_message)

    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and "detail" in data:
        response.data = error_body(str(data["detail"]))
    elif isinstance(data, dict):
        response.data = error_body(ValidationError.default_message, data)
    else:
        response.data = error_body(ValidationError.default_message, {"non_field_errors": data})
    return response
