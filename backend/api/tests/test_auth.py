from datetime import timedelta

from django.core import mail
from django.test import override_settings
from django.utils import timezone

from api.tests.base import APITestBase, User
from users.tokens import issue_session_token, parse_session_token

REGISTER_URL = "/api/auth/register"
LOGIN_URL = "/api/auth/login"
INVITE_URL = "/api/auth/invite"
ME_URL = "/api/auth/me"


class IdentityResolutionTests(APITestBase):
    def test_missing_token_on_protected_endpoint(self):
        response = self.client.get(ME_URL)

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Access token required"})

    def test_bad_token_is_forbidden(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer garbage")
        response = self.client.get(ME_URL)

        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.json(), {"error": "Invalid or expired token"}
        )

    def test_expired_token_is_forbidden(self):
        token = issue_session_token(
            self.viewer, now=timezone.now() - timedelta(days=8)
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        self.assertEqual(self.client.get(ME_URL).status_code, 403)

    def test_inactive_user_is_rejected(self):
        token = issue_session_token(self.other)
        User.objects.filter(pk=self.other.pk).update(is_active=False)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get(ME_URL)

        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            response.json(), {"error": "Invalid or inactive user"}
        )

    def test_deleted_user_is_rejected(self):
        ghost = User.objects.create_user("ghost@example.com", "pw123456")
        token = issue_session_token(ghost)
        ghost.delete()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        self.assertEqual(self.client.get(ME_URL).status_code, 401)

    def test_bad_token_on_public_read_degrades_to_anonymous(self):
        self.make_recipe(self.editor)
        self.client.credentials(HTTP_AUTHORIZATION="Bearer garbage")
        response = self.client.get("/api/recipes")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["pagination"]["total"], 1)


class MeTests(APITestBase):
    def test_profile(self):
        response = self.client_for(self.viewer).get(ME_URL)

        self.assertEqual(response.status_code, 200)
        user = response.json()["user"]
        self.assertEqual(user["id"], self.viewer.id)
        self.assertEqual(user["email"], "viewer@example.com")
        self.assertEqual(user["role"], "viewer")
        self.assertEqual(user["languagePref"], "es")
        self.assertIn("createdAt", user)
        self.assertNotIn("password", user)
        self.assertNotIn("inviteToken", user)

    def test_update_profile(self):
        response = self.client_for(self.viewer).put(
            ME_URL,
            {"name": "Abuela", "languagePref": "en"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["message"], "Profile updated successfully"
        )
        self.viewer.refresh_from_db()
        self.assertEqual(self.viewer.name, "Abuela")
        self.assertEqual(self.viewer.language_pref, "en")

    def test_update_profile_rejects_unknown_language(self):
        response = self.client_for(self.viewer).put(
            ME_URL, {"languagePref": "fr"}, format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["errors"][0]["param"], "languagePref"
        )


class LoginTests(APITestBase):
    def test_login(self):
        response = self.client.post(
            LOGIN_URL,
            {"email": "Editor@Example.com", "password": "editorpass1"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Login successful")
        self.assertEqual(
            body["user"],
            {
                "id": self.editor.id,
                "email": "editor@example.com",
                "role": "editor",
                "languagePref": "en",
            },
        )
        self.assertEqual(
            parse_session_token(body["token"])["id"], self.editor.id
        )

    def test_wrong_password(self):
        response = self.client.post(
            LOGIN_URL,
            {"email": "editor@example.com", "password": "wrong-password"},
            format="json",
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_unknown_email_looks_like_wrong_password(self):
        response = self.client.post(
            LOGIN_URL,
            {"email": "nobody@example.com", "password": "whatever1"},
            format="json",
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_inactive_user_cannot_log_in(self):
        User.objects.filter(pk=self.other.pk).update(is_active=False)
        response = self.client.post(
            LOGIN_URL,
            {"email": "other@example.com", "password": "otherpass1"},
            format="json",
        )

        self.assertEqual(response.status_code, 401)

    def test_invalid_email_format(self):
        response = self.client.post(
            LOGIN_URL,
            {"email": "not-an-email", "password": "whatever1"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["errors"],
            [
                {
                    "msg": "Invalid email format",
                    "param": "email",
                    "location": "body",
                }
            ],
        )


class InviteTests(APITestBase):
    @override_settings(FRONTEND_URL="https://recipes.example.com")
    def test_admin_invites_by_email(self):
        response = self.client_for(self.admin).post(
            INVITE_URL, {"email": "cousin@example.com"}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()["message"], "Invitation sent successfully"
        )
        self.admin.refresh_from_db()
        self.assertEqual(len(self.admin.invite_token), 64)
        self.assertTrue(self.admin.has_live_invite())

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, ["cousin@example.com"])
        self.assertIn(
            "https://recipes.example.com/register?token="
            f"{self.admin.invite_token}",
            message.body,
        )

    def test_new_invite_replaces_previous_token(self):
        client = self.client_for(self.admin)
        client.post(INVITE_URL, {"email": "a@example.com"}, format="json")
        self.admin.refresh_from_db()
        first = self.admin.invite_token

        client.post(INVITE_URL, {"email": "b@example.com"}, format="json")
        self.admin.refresh_from_db()

        self.assertNotEqual(first, self.admin.invite_token)

    def test_registered_email_is_rejected(self):
        response = self.client_for(self.admin).post(
            INVITE_URL, {"email": "VIEWER@example.com"}, format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(), {"error": "Email already registered or invited"}
        )
        self.assertEqual(len(mail.outbox), 0)

    def test_only_admins_invite(self):
        for user in (self.editor, self.viewer):
            response = self.client_for(user).post(
                INVITE_URL, {"email": "x@example.com"}, format="json"
            )
            self.assertEqual(response.status_code, 403)
            self.assertEqual(
                response.json(), {"error": "Insufficient permissions"}
            )

    def test_anonymous_cannot_invite(self):
        response = self.client.post(
            INVITE_URL, {"email": "x@example.com"}, format="json"
        )
        self.assertEqual(response.status_code, 401)


class RegisterTests(APITestBase):
    def setUp(self):
        super().setUp()
        self.token = self.admin.issue_invite()

    def payload(self, **overrides):
        data = {
            "email": "niece@example.com",
            "password": "longenough",
            "name": "Niece",
            "inviteToken": self.token,
            "languagePref": "es",
        }
        data.update(overrides)
        return data

    def test_register_with_invite(self):
        response = self.client.post(
            REGISTER_URL, self.payload(), format="json"
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "User registered successfully")
        self.assertEqual(
            set(body["user"]),
            {"id", "email", "name", "role", "languagePref"},
        )
        self.assertEqual(body["user"]["role"], "viewer")

        user = User.objects.get(email="niece@example.com")
        self.assertEqual(user.invited_by, self.admin)
        self.assertEqual(user.language_pref, "es")
        self.assertTrue(user.check_password("longenough"))
        self.assertEqual(parse_session_token(body["token"])["id"], user.id)

        self.admin.refresh_from_db()
        self.assertIsNone(self.admin.invite_token)

    def test_token_is_single_use(self):
        self.client.post(REGISTER_URL, self.payload(), format="json")
        response = self.client.post(
            REGISTER_URL,
            self.payload(email="second@example.com"),
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(), {"error": "Invalid or expired invite token"}
        )
        self.assertFalse(
            User.objects.filter(email="second@example.com").exists()
        )

    def test_expired_invite(self):
        token = self.admin.issue_invite(
            now=timezone.now() - timedelta(days=8)
        )
        response = self.client.post(
            REGISTER_URL, self.payload(inviteToken=token), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(
            User.objects.filter(email="niece@example.com").exists()
        )

    def test_unknown_invite(self):
        response = self.client.post(
            REGISTER_URL, self.payload(inviteToken="f" * 64), format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_duplicate_email(self):
        response = self.client.post(
            REGISTER_URL,
            self.payload(email="Editor@Example.com"),
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(), {"error": "Email already registered"}
        )
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.invite_token, self.token)

    def test_short_password(self):
        response = self.client.post(
            REGISTER_URL, self.payload(password="short"), format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn(
            {
                "msg": "Password must be at least 8 characters",
                "param": "password",
                "location": "body",
            },
            response.json()["errors"],
        )

    def test_missing_fields_are_all_reported(self):
        response = self.client.post(REGISTER_URL, {}, format="json")

        self.assertEqual(response.status_code, 400)
        params = {error["param"] for error in response.json()["errors"]}
        self.assertEqual(params, {"email", "password", "name", "inviteToken"})
