"""
Renders every API error as ``{"error": ...}`` or ``{"errors": [...]}``.

Kept apart from ``api.exceptions``: importing ``rest_framework.views``
loads the configured authentication classes, which import the exception
types from there.
"""

import logging
from typing import Any, Optional

from django.conf import settings
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler

from api.constants import (
    MSG_ACCESS_DENIED,
    MSG_SERVER_ERROR,
    MSG_TOKEN_REQUIRED,
)

logger = logging.getLogger(__name__)


def _flatten(detail: Any, prefix: str = "") -> list[tuple[str, str]]:
    if isinstance(detail, dict):
        items = []
        for key, value in detail.items():
            key = "" if key == api_settings.NON_FIELD_ERRORS_KEY else str(key)
            path = f"{prefix}.{key}" if prefix and key else (prefix or key)
            items.extend(_flatten(value, path))
        return items
    if isinstance(detail, (list, tuple)):
        items = []
        for value in detail:
            items.extend(_flatten(value, prefix))
        return items
    return [(prefix, str(detail))]


def validation_errors(detail: Any, location: str = "body") -> list[dict]:
    return [
        {"msg": msg, "param": param, "location": location}
        for param, msg in _flatten(detail)
    ]


def _message(exc: exceptions.APIException) -> str:
    detail = exc.detail
    if isinstance(detail, (list, tuple)) and detail:
        detail = detail[0]
    if isinstance(detail, dict):
        detail = next(iter(detail.values()), "")
    return str(detail)


def api_exception_handler(exc: Exception, context: dict) -> Optional[Response]:
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s", type(view).__name__ if view else "view"
        )
        message = str(exc) if settings.DEBUG else MSG_SERVER_ERROR
        return Response(
            {"error": message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        location = getattr(exc, "location", "body")
        response.data = {"errors": validation_errors(exc.detail, location)}
    elif isinstance(exc, exceptions.NotAuthenticated):
        response.data = {"error": MSG_TOKEN_REQUIRED}
    elif isinstance(exc, exceptions.PermissionDenied) and (
        str(exc.detail) == str(exceptions.PermissionDenied.default_detail)
    ):
        response.data = {"error": MSG_ACCESS_DENIED}
    elif isinstance(exc, exceptions.APIException):
        response.data = {"error": _message(exc)}
    else:
        response.data = {"error": str(response.data.get("detail", ""))}
    return response
