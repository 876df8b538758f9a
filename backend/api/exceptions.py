from rest_framework import exceptions, status

from api.constants import MSG_INVALID_TOKEN


class InvalidTokenError(exceptions.APIException):
    """Bearer token present but unusable; 403 so clients do not retry."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = MSG_INVALID_TOKEN
    default_code = "invalid_token"


class BadRequest(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request."
    default_code = "bad_request"


class Conflict(BadRequest):
    """Uniqueness violation; reported as 400 like other bad input."""

    default_detail = "Resource already exists."
    default_code = "conflict"


class QueryValidationError(exceptions.ValidationError):
    location = "query"
