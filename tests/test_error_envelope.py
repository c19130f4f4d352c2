"""Tests for the error boundary: every failure leaves the API as the JSON error envelope."""

import unittest

from app.core.errors import (
    AppError,
    AuthenticationError,
    ConflictError,
    InternalError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from tests.support import make_app, make_client


def _app_with_failing_routes(**overrides):
    app = make_app(**overrides)

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("database password is hunter2")

    @app.get("/conflict")
    def conflict() -> None:
        raise ConflictError("Already there", details={"field": "email"})

    return app


class TestErrorTaxonomy(unittest.TestCase):
    def test_status_and_codes(self) -> None:
        cases = [
            (ValidationError("bad"), 400, "VALIDATION_ERROR"),
            (AuthenticationError(), 401, "AUTHENTICATION_ERROR"),
            (NotFoundError("Task"), 404, "NOT_FOUND"),
            (ConflictError("dup"), 409, "CONFLICT_ERROR"),
            (RateLimitError(), 429, "RATE_LIMIT_ERROR"),
        ]
        for err, status_code, code in cases:
            with self.subTest(code=code):
                self.assertIsInstance(err, AppError)
                self.assertEqual(err.status_code, status_code)
                self.assertEqual(err.code, code)

    def test_not_found_message(self) -> None:
        self.assertEqual(NotFoundError("Task").message, "Task not found")


class TestErrorEnvelope(unittest.TestCase):
    def test_app_error_with_details(self) -> None:
        client = make_client(_app_with_failing_routes())
        resp = client.get("/conflict")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(
            resp.json(),
            {
                "success": False,
                "error": {"code": "CONFLICT_ERROR", "message": "Already there", "details": {"field": "email"}},
            },
        )

    def test_unexpected_error_in_dev_exposes_message(self) -> None:
        client = make_client(_app_with_failing_routes(APP_ENV="dev"))
        with self.assertLogs("app.api.errors", level="ERROR"):
            resp = client.get("/boom")
        self.assertEqual(resp.status_code, 500)
        error = resp.json()["error"]
        self.assertEqual(error["code"], "INTERNAL_ERROR")
        self.assertIn("hunter2", error["message"])
        self.assertIn("RuntimeError", error["details"])

    def test_unexpected_error_in_prod_is_generic(self) -> None:
        client = make_client(_app_with_failing_routes(APP_ENV="prod"))
        with self.assertLogs("app.api.errors", level="ERROR"):
            resp = client.get("/boom")
        self.assertEqual(resp.status_code, 500)
        error = resp.json()["error"]
        expected = InternalError()
        self.assertEqual(error, {"code": expected.code, "message": expected.message})
        self.assertNotIn("hunter2", resp.text)

    def test_unknown_route(self) -> None:
        resp = make_client(make_app()).delete("/api/v1/does-not-exist")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"]["message"], "Route DELETE /api/v1/does-not-exist not found")

    def test_wrong_method(self) -> None:
        resp = make_client(make_app()).get("/api/v1/auth/login")
        self.assertEqual(resp.status_code, 405)
        self.assertFalse(resp.json()["success"])

    def test_validation_details_name_fields(self) -> None:
        resp = make_client(make_app()).post("/api/v1/auth/login", json={"email": "a@x.com"})
        self.assertEqual(resp.status_code, 400)
        fields = [d["field"] for d in resp.json()["error"]["details"]]
        self.assertIn("password", fields)


if __name__ == "__main__":
    unittest.main()
