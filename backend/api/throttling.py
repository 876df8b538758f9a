from django.http import JsonResponse
from rest_framework import status
from rest_framework.throttling import SimpleRateThrottle

from api.constants import MSG_RATE_LIMITED

DURATIONS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

API_PREFIX = "/api"


class ClientAddressRateThrottle(SimpleRateThrottle):
    """
    Sliding-window request budget per client address.

    Rates accept a multiplier on the period, e.g. ``100/15m``.
    """

    scope = "api"

    def parse_rate(self, rate):
        if rate is None:
            return (None, None)
        num, period = rate.split("/")
        multiplier = int(period[:-1] or 1)
        return (int(num), multiplier * DURATIONS[period[-1]])

    def get_cache_key(self, request, view):
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }


class APIRateLimitMiddleware:
    """
    Spend the client's budget on every ``/api`` request.

    Runs ahead of view dispatch, so requests later refused for a missing
    or bad token, and unknown API paths, count against the budget too.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path == API_PREFIX or request.path.startswith(
            f"{API_PREFIX}/"
        ):
            throttle = ClientAddressRateThrottle()
            if not throttle.allow_request(request, None):
                response = JsonResponse(
                    {"error": MSG_RATE_LIMITED},
                    status=status.HTTP_429_TOO_MANY_REQUESTS,
                )
                wait = throttle.wait()
                if wait is not None:
                    response["Retry-After"] = str(int(wait) + 1)
                return response
        return self.get_response(request)
