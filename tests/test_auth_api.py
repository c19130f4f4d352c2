"""HTTP tests for /api/v1/auth and the bearer-token gate."""

import unittest
from datetime import UTC, datetime, timedelta

from app.core.security import create_access_token
from app.models import UserRole
from tests.support import bearer, make_app, make_client

REGISTER_BODY = {"email": "a@x.com", "password": "Passw0rd", "name": "Ann"}


class AuthApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.app = make_app()
        self.client = make_client(self.app)

    def post(self, path: str, json: dict | None = None, headers: dict | None = None):
        return self.client.post(f"/api/v1/auth/{path}", json=json, headers=headers)


class TestAuthScenario(AuthApiTestCase):
    """Register, login, refresh, reuse, logout, logout again, refresh after logout."""

    def test_full_lifecycle(self) -> None:
        resp = self.post("register", REGISTER_BODY)
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["user"]["email"], "a@x.com")
        registered = body["data"]["tokens"]
        self.assertIn("accessToken", registered)
        self.assertIn("refreshToken", registered)

        resp = self.post("login", {"email": "a@x.com", "password": "Passw0rd"})
        self.assertEqual(resp.status_code, 200)
        logged_in = resp.json()["data"]["tokens"]
        self.assertNotEqual(logged_in, registered)

        resp = self.post("refresh", {"refreshToken": logged_in["refreshToken"]})
        self.assertEqual(resp.status_code, 200)
        newest = resp.json()["data"]
        self.assertNotEqual(newest["refreshToken"], logged_in["refreshToken"])

        resp = self.post("refresh", {"refreshToken": logged_in["refreshToken"]})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"]["code"], "AUTHENTICATION_ERROR")

        self.assertEqual(self.post("logout", {"refreshToken": newest["refreshToken"]}).status_code, 200)
        self.assertEqual(self.post("logout", {"refreshToken": newest["refreshToken"]}).status_code, 200)
        self.assertEqual(self.post("refresh", {"refreshToken": newest["refreshToken"]}).status_code, 401)


class TestRegisterApi(AuthApiTestCase):
    def test_response_never_contains_password(self) -> None:
        resp = self.post("register", REGISTER_BODY)
        user = resp.json()["data"]["user"]
        self.assertEqual(set(user) - {"createdAt", "updatedAt"}, {"id", "email", "name", "role"})
        self.assertEqual(user["role"], "user")

    def test_duplicate_email_is_409(self) -> None:
        self.post("register", REGISTER_BODY)
        resp = self.post("register", {**REGISTER_BODY, "email": "A@X.com"})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"]["code"], "CONFLICT_ERROR")

    def test_weak_password_is_400(self) -> None:
        resp = self.post("register", {**REGISTER_BODY, "password": "alllowercase1"})
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"]["code"], "VALIDATION_ERROR")

    def test_invalid_email_and_short_name_are_400(self) -> None:
        self.assertEqual(self.post("register", {**REGISTER_BODY, "email": "nope"}).status_code, 400)
        self.assertEqual(self.post("register", {**REGISTER_BODY, "name": " A "}).status_code, 400)


class TestLoginApi(AuthApiTestCase):
    def test_enumeration_resistant_message(self) -> None:
        self.post("register", REGISTER_BODY)
        wrong_password = self.post("login", {"email": "a@x.com", "password": "Wrong0ne"})
        unknown_email = self.post("login", {"email": "b@x.com", "password": "Passw0rd"})
        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_email.status_code, 401)
        self.assertEqual(wrong_password.json()["error"], unknown_email.json()["error"])


class TestProtectedAuthRoutes(AuthApiTestCase):
    """profile and logout-all need a well-formed, valid bearer access token."""

    def setUp(self) -> None:
        super().setUp()
        self.tokens = self.post("register", REGISTER_BODY).json()["data"]["tokens"]

    def test_profile(self) -> None:
        resp = self.client.get("/api/v1/auth/profile", headers=bearer(self.tokens))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["name"], "Ann")

    def test_missing_header(self) -> None:
        resp = self.client.get("/api/v1/auth/profile")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"]["message"], "No authorization header provided")

    def test_malformed_headers(self) -> None:
        token = self.tokens["accessToken"]
        for value in (f"bearer {token}", f"Token {token}", f"Bearer  {token}", f"Bearer {token} extra", "Bearer"):
            with self.subTest(value=value):
                resp = self.client.get("/api/v1/auth/profile", headers={"Authorization": value})
                self.assertEqual(resp.status_code, 401)
                self.assertEqual(resp.json()["error"]["message"], "Invalid authorization header format")

    def test_expired_and_invalid_tokens_are_distinguished(self) -> None:
        settings = self.app.state.settings
        expired = create_access_token(
            1, "a@x.com", UserRole.USER, settings, now=datetime.now(UTC) - timedelta(hours=1)
        )
        resp = self.client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {expired}"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"]["details"], {"reason": "token_expired"})
        self.assertEqual(resp.headers["WWW-Authenticate"], "Bearer")

        resp = self.client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer abc.def.ghi"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"]["details"], {"reason": "token_invalid"})

    def test_refresh_token_cannot_be_used_as_bearer(self) -> None:
        headers = {"Authorization": f"Bearer {self.tokens['refreshToken']}"}
        self.assertEqual(self.client.get("/api/v1/auth/profile", headers=headers).status_code, 401)

    def test_logout_all(self) -> None:
        second = self.post("login", {"email": "a@x.com", "password": "Passw0rd"}).json()["data"]["tokens"]
        resp = self.post("logout-all", headers=bearer(self.tokens))
        self.assertEqual(resp.status_code, 200)
        for tokens in (self.tokens, second):
            self.assertEqual(self.post("refresh", {"refreshToken": tokens["refreshToken"]}).status_code, 401)

    def test_logout_all_requires_bearer(self) -> None:
        self.assertEqual(self.post("logout-all").status_code, 401)

    def test_profile_of_deleted_user_is_404(self) -> None:
        ghost = create_access_token(999, "ghost@x.com", UserRole.USER, self.app.state.settings)
        resp = self.client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {ghost}"})
        self.assertEqual(resp.status_code, 404)


class TestMiscRoutes(AuthApiTestCase):
    def test_health(self) -> None:
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")
        self.assertEqual(resp.json()["database"], "connected")
        self.assertIsNotNone(datetime.fromisoformat(resp.json()["timestamp"]).tzinfo)

    def test_unknown_route_uses_envelope(self) -> None:
        resp = self.client.get("/api/v1/nope")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"]["code"], "NOT_FOUND")

    def test_refresh_requires_body_field(self) -> None:
        resp = self.post("refresh", {})
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
