import os
import subprocess
import sys
from unittest.mock import patch

from django.conf import settings
from django.core.management import call_command
from django.test import SimpleTestCase, override_settings
from rest_framework import exceptions

from api.exceptions import QueryValidationError
from api.handlers import api_exception_handler, validation_errors
from api.tests.base import APITestBase
from api.throttling import ClientAddressRateThrottle

RATE_LIMITED = {
    "error": "Too many requests from this IP, please try again later."
}


class StartupTests(SimpleTestCase):
    def test_system_checks_pass(self):
        call_command("check")

    def test_fresh_interpreter_loads_urls_and_checks(self):
        script = (
            "import django; django.setup(); "
            "from django.urls import resolve; "
            "resolve('/api/recipes'); "
            "from django.core.management import call_command; "
            "call_command('check')"
        )
        result = subprocess.run(
            [sys.executable, "-c", script],
            cwd=settings.BASE_DIR,
            env={
                **os.environ,
                "DJANGO_SETTINGS_MODULE": "family_recipes.settings",
            },
            capture_output=True,
            text=True,
        )

        self.assertEqual(result.returncode, 0, result.stderr)


class ServiceEndpointTests(APITestBase):
    def test_health(self):
        response = self.client.get("/api/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "OK")
        self.assertIn("timestamp", response.json())

    def test_unknown_api_path(self):
        response = self.client.get("/api/does-not-exist")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "API endpoint not found"})

    def test_trailing_slash_is_accepted(self):
        self.assertEqual(self.client.get("/api/recipes/").status_code, 200)


@patch.object(ClientAddressRateThrottle, "THROTTLE_RATES", {"api": "3/15m"})
class ThrottleTests(APITestBase):
    def test_requests_over_budget_are_rejected(self):
        statuses = [
            self.client.get("/api/recipes").status_code for _ in range(4)
        ]
        response = self.client.get("/api/recipes")

        self.assertEqual(statuses, [200, 200, 200, 429])
        self.assertEqual(response.json(), RATE_LIMITED)
        self.assertIn("Retry-After", response)

    def test_rejected_requests_spend_the_budget(self):
        statuses = [
            self.client.get("/api/favorites").status_code for _ in range(3)
        ]
        response = self.client.get("/api/recipes")

        self.assertEqual(statuses, [401, 401, 401])
        self.assertEqual(response.status_code, 429)

    def test_invalid_tokens_are_throttled(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer nope")
        statuses = [
            self.client.get("/api/auth/me").status_code for _ in range(5)
        ]
        self.assertEqual(statuses, [403, 403, 403, 429, 429])

    def test_health_and_unknown_paths_count(self):
        self.client.get("/api/health")
        self.client.get("/api/does-not-exist")
        self.client.get("/api/health")

        response = self.client.get("/api/health")

        self.assertEqual(response.status_code, 429)
        self.assertEqual(response.json(), RATE_LIMITED)

    def test_admin_is_outside_the_budget(self):
        for _ in range(4):
            self.client.get("/api/health")
        self.assertNotEqual(self.client.get("/admin/login/").status_code, 429)

    def test_rate_with_period_multiplier(self):
        throttle = ClientAddressRateThrottle.__new__(ClientAddressRateThrottle)

        self.assertEqual(throttle.parse_rate("100/15m"), (100, 900))
        self.assertEqual(throttle.parse_rate("5/s"), (5, 1))
        self.assertEqual(throttle.parse_rate(None), (None, None))


class ExceptionHandlerTests(SimpleTestCase):
    def test_nested_validation_errors_are_flattened(self):
        errors = validation_errors(
            {"email": ["Invalid email format"], "tags": {0: ["Too long"]}}
        )
        self.assertEqual(
            errors,
            [
                {
                    "msg": "Invalid email format",
                    "param": "email",
                    "location": "body",
                },
                {"msg": "Too long", "param": "tags.0", "location": "body"},
            ],
        )

    def test_query_errors_carry_their_location(self):
        response = api_exception_handler(
            QueryValidationError({"limit": ["Too big"]}), {}
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.data,
            {
                "errors": [
                    {"msg": "Too big", "param": "limit", "location": "query"}
                ]
            },
        )

    def test_default_permission_message_is_replaced(self):
        response = api_exception_handler(exceptions.PermissionDenied(), {})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data, {"error": "Access denied"})

    def test_not_found_keeps_its_message(self):
        response = api_exception_handler(
            exceptions.NotFound("Recipe not found"), {}
        )
        self.assertEqual(response.data, {"error": "Recipe not found"})

    @override_settings(DEBUG=False)
    def test_unexpected_error_is_hidden(self):
        with self.assertLogs("api.handlers", level="ERROR"):
            response = api_exception_handler(RuntimeError("db is down"), {})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"error": "Something went wrong!"})

    @override_settings(DEBUG=True)
    def test_unexpected_error_is_shown_in_debug(self):
        with self.assertLogs("api.handlers", level="ERROR"):
            response = api_exception_handler(RuntimeError("db is down"), {})

        self.assertEqual(response.data, {"error": "db is down"})
