"""HTTP tests for the login wall: cookie issuance, redirects, logout, and generic error pages."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from slamdash.core.exceptions import StorageError
from slamdash.main import create_app
from tests.support import make_settings


class WebAuthTestCase(unittest.TestCase):
    settings_overrides: dict[str, object] = {}

    def setUp(self) -> None:
        self.app = create_app(make_settings(**self.settings_overrides))
        self.client = TestClient(self.app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)
        self.app.state.credentials.create_account(
            "alice", "alice@slam.local", "alice-password", role="manager"
        )
        self.app.state.credentials.create_account(
            "dora", "dora@slam.local", "dora-password", role="analyst", active=False
        )

    def _login(self, username: str, password: str, role: str):
        return self.client.post(
            "/authenticate",
            data={"username": username, "password": password, "role": role},
            follow_redirects=False,
        )

    def assertRedirectsToLogin(self, response) -> None:
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/login")


class TestLoginPage(WebAuthTestCase):
    def test_login_form_lists_access_groups(self) -> None:
        response = self.client.get("/login")
        self.assertEqual(response.status_code, 200)
        for group in ("administrator", "manager", "analyst", "viewer"):
            self.assertIn(f'value="{group}"', response.text)

    def test_root_serves_login_form(self) -> None:
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn('action="/authenticate"', response.text)

    def test_get_authenticate_redirects_to_login(self) -> None:
        self.assertRedirectsToLogin(self.client.get("/authenticate", follow_redirects=False))


class TestProtectedRoutes(WebAuthTestCase):
    def test_dashboard_without_cookie_redirects(self) -> None:
        self.assertRedirectsToLogin(self.client.get("/dashboard", follow_redirects=False))

    def test_me_without_cookie_redirects(self) -> None:
        self.assertRedirectsToLogin(self.client.get("/api/v1/auth/me", follow_redirects=False))

    def test_garbage_cookie_redirects(self) -> None:
        self.client.cookies.set("session_id", "not-a-real-token")
        self.assertRedirectsToLogin(self.client.get("/dashboard", follow_redirects=False))

    def test_store_failure_during_lookup_is_generic_500(self) -> None:
        self.client.cookies.set("session_id", "a" * 64)
        with patch.object(
            self.app.state.sessions,
            "validate",
            side_effect=StorageError("Session lookup failed"),
        ):
            response = self.client.get("/dashboard", follow_redirects=False)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.text, "Internal Server Error")
        self.assertNotIn("location", response.headers)
        self.assertNotIn("Session lookup failed", response.text)


class TestLoginFlow(WebAuthTestCase):
    def test_bootstrap_admin_logs_in(self) -> None:
        response = self._login("admin", "admin123", "administrator")
        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/dashboard")
        self.assertIn("session_id", response.cookies)

    def test_cookie_is_http_only_and_lives_one_day(self) -> None:
        response = self._login("alice", "alice-password", "analyst")
        set_cookie = response.headers["set-cookie"].lower()
        self.assertIn("httponly", set_cookie)
        self.assertIn("max-age=86400", set_cookie)
        self.assertIn("path=/", set_cookie)
        self.assertNotIn("secure", set_cookie)

    def test_session_opens_dashboard_and_me(self) -> None:
        self._login("alice", "alice-password", "manager")
        dashboard = self.client.get("/dashboard", follow_redirects=False)
        self.assertEqual(dashboard.status_code, 200)
        self.assertIn("alice", dashboard.text)

        me = self.client.get("/api/v1/auth/me", follow_redirects=False)
        self.assertEqual(me.status_code, 200)
        body = me.json()
        self.assertEqual(body["username"], "alice")
        self.assertEqual(body["role"], "manager")
        self.assertNotIn("password_hash", body)

    def test_wrong_password_generic_error_without_cookie(self) -> None:
        response = self._login("alice", "wrong-password", "viewer")
        self.assertEqual(response.status_code, 401)
        self.assertIn("Invalid credentials", response.text)
        self.assertNotIn("set-cookie", response.headers)

    def test_unknown_user_and_inactive_user_get_same_message(self) -> None:
        unknown = self._login("nobody", "alice-password", "viewer")
        inactive = self._login("dora", "dora-password", "viewer")
        wrong = self._login("alice", "wrong-password", "viewer")
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(inactive.status_code, 401)
        self.assertEqual(unknown.text, wrong.text)
        self.assertEqual(inactive.text, wrong.text)

    def test_missing_fields_are_invalid_credentials(self) -> None:
        response = self.client.post("/authenticate", data={}, follow_redirects=False)
        self.assertEqual(response.status_code, 401)
        self.assertIn("Invalid credentials", response.text)

    def test_role_too_low_for_group_denied(self) -> None:
        response = self._login("alice", "alice-password", "administrator")
        self.assertEqual(response.status_code, 403)
        self.assertIn("Access denied for selected group", response.text)
        self.assertNotIn("set-cookie", response.headers)

    def test_unknown_group_denied(self) -> None:
        response = self._login("admin", "admin123", "superuser")
        self.assertEqual(response.status_code, 403)
        self.assertNotIn("set-cookie", response.headers)

    def test_storage_failure_sets_no_cookie(self) -> None:
        with patch.object(
            self.app.state.sessions,
            "issue",
            side_effect=StorageError("Failed to create session"),
        ):
            response = self._login("alice", "alice-password", "viewer")
        self.assertEqual(response.status_code, 500)
        self.assertIn("Failed to create session", response.text)
        self.assertNotIn("set-cookie", response.headers)


class TestSecureCookie(WebAuthTestCase):
    settings_overrides = {"SESSION_COOKIE_SECURE": True}

    def test_cookie_marked_secure_when_configured(self) -> None:
        response = self._login("alice", "alice-password", "viewer")
        self.assertEqual(response.status_code, 303)
        set_cookie = response.headers["set-cookie"].lower()
        self.assertIn("; secure", set_cookie)
        self.assertIn("httponly", set_cookie)


class TestLogout(WebAuthTestCase):
    def test_logout_clears_cookie_and_revokes_token(self) -> None:
        token = self._login("alice", "alice-password", "viewer").cookies["session_id"]

        response = self.client.get("/logout", follow_redirects=False)
        self.assertRedirectsToLogin(response)
        self.assertIn("max-age=0", response.headers["set-cookie"].lower())
        self.assertIsNone(self.app.state.sessions.validate(token))

        # Replaying the old token does not get past the gate.
        self.client.cookies.set("session_id", token)
        self.assertRedirectsToLogin(self.client.get("/dashboard", follow_redirects=False))

    def test_logout_without_session_still_redirects(self) -> None:
        self.assertRedirectsToLogin(self.client.get("/logout", follow_redirects=False))


class TestHealth(WebAuthTestCase):
    def test_health_reports_connected_store(self) -> None:
        response = self.client.get("/api/v1/health/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "connected")


if __name__ == "__main__":
    unittest.main()
