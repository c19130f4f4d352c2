"""Tests for Settings validation."""

import unittest

from pydantic import ValidationError

from app.core.config import Settings
from tests.support import make_settings


class TestSettings(unittest.TestCase):
    def test_test_settings_are_valid(self) -> None:
        settings = make_settings()
        self.assertFalse(settings.is_production)
        self.assertEqual(settings.JWT_SECRET.get_secret_value(), "test-access-secret")

    def test_production_flag(self) -> None:
        self.assertTrue(make_settings(APP_ENV="prod").is_production)

    def test_rejects_unknown_environment(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(APP_ENV="staging")

    def test_secrets_must_be_non_empty_and_distinct(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_SECRET="  ")
        with self.assertRaises(ValidationError):
            make_settings(JWT_REFRESH_SECRET="test-access-secret")

    def test_database_url_scheme(self) -> None:
        self.assertEqual(
            make_settings(DATABASE_URL=" postgresql+psycopg2://u:p@db/tasks ").DATABASE_URL,
            "postgresql+psycopg2://u:p@db/tasks",
        )
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="mysql://u:p@db/tasks")
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="   ")

    def test_postgres_urls_use_psycopg2(self) -> None:
        for url in ("postgresql://u:p@db/tasks", "postgres://u:p@db/tasks", "postgres+psycopg2://u:p@db/tasks"):
            with self.subTest(url=url):
                self.assertEqual(make_settings(DATABASE_URL=url).DATABASE_URL, "postgresql+psycopg2://u:p@db/tasks")
        self.assertTrue(Settings.model_fields["DATABASE_URL"].default.startswith("postgresql+psycopg2://"))

    def test_log_level_is_normalized(self) -> None:
        self.assertEqual(make_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            make_settings(LOG_LEVEL="chatty")

    def test_numeric_bounds(self) -> None:
        for field, value in (
            ("BCRYPT_ROUNDS", 3),
            ("BCRYPT_ROUNDS", 32),
            ("RATE_LIMIT_WINDOW_SECONDS", 0),
            ("RATE_LIMIT_WINDOW_SECONDS", 86401),
            ("RATE_LIMIT_MAX_REQUESTS", 0),
        ):
            with self.subTest(field=field, value=value):
                with self.assertRaises(ValidationError):
                    make_settings(**{field: value})

    def test_unparseable_durations_are_accepted(self) -> None:
        self.assertEqual(make_settings(JWT_EXPIRES_IN=" soon ").JWT_EXPIRES_IN, "soon")


if __name__ == "__main__":
    unittest.main()
