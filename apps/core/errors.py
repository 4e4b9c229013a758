from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from django_ratelimit.exceptions import Ratelimited
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidArgument(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Malformed or missing input."
    default_code = "invalid-argument"


class PermissionDeniedError(exceptions.APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have access to this resource."
    default_code = "permission-denied"


class NotFoundError(exceptions.APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not-found"


class FailedPrecondition(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The operation is not allowed in the current state."
    default_code = "failed-precondition"


class Unavailable(exceptions.APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "A downstream service is unavailable."
    default_code = "unavailable"


ERROR_KINDS = (
    "invalid-argument",
    "unauthenticated",
    "permission-denied",
    "not-found",
    "failed-precondition",
    "unavailable",
)

_BUILTIN_KINDS: tuple[tuple[type[Exception], str], ...] = (
    (exceptions.NotAuthenticated, "unauthenticated"),
    (exceptions.AuthenticationFailed, "unauthenticated"),
    (exceptions.ValidationError, "invalid-argument"),
    (exceptions.ParseError, "invalid-argument"),
    (Ratelimited, "resource-exhausted"),
    (exceptions.PermissionDenied, "permission-denied"),
    (DjangoPermissionDenied, "permission-denied"),
    (exceptions.NotFound, "not-found"),
    (Http404, "not-found"),
    (exceptions.Throttled, "resource-exhausted"),
)


def error_kind(exc: Exception) -> str:
    code = getattr(exc, "default_code", None)
    if code in ERROR_KINDS:
        return code
    for exc_type, kind in _BUILTIN_KINDS:
        if isinstance(exc, exc_type):
            return kind
    return "internal"


def _flatten_detail(detail) -> str:
    if isinstance(detail, dict):
        parts = []
        for key, value in detail.items():
            text = _flatten_detail(value)
            parts.append(text if key == "non_field_errors" else f"{key}: {text}")
        return "; ".join(parts)
    if isinstance(detail, (list, tuple)):
        return "; ".join(_flatten_detail(item) for item in detail)
    return str(detail)


def api_exception_handler(exc: Exception, context: dict) -> Response | None:
    """Render every handled error as {"error": <kind>, "detail": <message>}."""
    response = exception_handler(exc, context)
    if response is None:
        return None
    kind = error_kind(exc)
    detail = getattr(exc, "detail", None)
    if detail is None and isinstance(response.data, dict):
        detail = response.data.get("detail")
    payload = {
        "error": kind,
        "detail": _flatten_detail(detail) if detail is not None else str(exc),
    }
    if isinstance(detail, dict):
        payload["fields"] = detail
    if kind != "invalid-argument":
        view = context.get("view")
        logger.info(
            "api.rejected",
            extra={"error_kind": kind, "view": type(view).__name__ if view else None},
        )
    if kind == "resource-exhausted":
        response.status_code = status.HTTP_429_TOO_MANY_REQUESTS
    response.data = payload
    return response
