import logging

from django.contrib.auth import get_user_model
from rest_framework import authentication, exceptions
from rest_framework.permissions import SAFE_METHODS

from api.constants import MSG_INACTIVE_USER
from api.exceptions import InvalidTokenError
from users.tokens import InvalidToken, parse_session_token

logger = logging.getLogger(__name__)

User = get_user_model()


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """
    Resolve `Authorization: Bearer <token>` to an active user.

    No header means anonymous (the permission layer answers 401 where an
    identity is required), a bad or expired token is rejected with 403,
    and a token for a missing or deactivated user with 401.
    """

    keyword = "Bearer"

    def get_token(self, request):
        header = request.META.get("HTTP_AUTHORIZATION", "")
        parts = header.split()
        if len(parts) < 2:
            return None
        return parts[1]

    def authenticate(self, request):
        token = self.get_token(request)
        if not token:
            return None

        try:
            claims = parse_session_token(token)
        except InvalidToken as exc:
            logger.debug("Rejected bearer token: %s", exc)
            raise InvalidTokenError()

        user = User.objects.filter(pk=claims["id"]).first()
        if user is None or not user.is_active:
            raise exceptions.AuthenticationFailed(MSG_INACTIVE_USER)
        return (user, claims)

    def authenticate_header(self, request):
        return self.keyword


class OptionalBearerTokenAuthentication(BearerTokenAuthentication):
    """Same resolution, but every failure degrades to anonymous."""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except exceptions.APIException as exc:
            logger.debug("Optional auth ignored: %s", exc.detail)
            return None


class OptionalAuthForReadsMixin:
    """Public-or-private reads resolve identity optionally; writes strictly."""

    optional_auth_methods = SAFE_METHODS

    def get_authenticators(self):
        if self.request.method in self.optional_auth_methods:
            return [OptionalBearerTokenAuthentication()]
        return super().get_authenticators()

    def permission_denied(self, request, message=None, code=None):
        if request.method in self.optional_auth_methods:
            raise exceptions.PermissionDenied(detail=message, code=code)
        super().permission_denied(request, message=message, code=code)
