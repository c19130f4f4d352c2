"""Unit and integration tests for the expired refresh-token sweep."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

from app import token_cleanup
from app.core.security import hash_password
from app.models import RefreshToken
from app.repositories import refresh_tokens, users
from app.services.token_cleanup import run_token_cleanup
from tests.support import make_session, make_settings


class TestTokenCleanupDisabled(unittest.TestCase):
    """When TOKEN_CLEANUP_ENABLED is False, run_token_cleanup does nothing."""

    def test_returns_zero_and_does_not_query(self) -> None:
        settings = MagicMock()
        settings.TOKEN_CLEANUP_ENABLED = False
        session = MagicMock()
        self.assertEqual(run_token_cleanup(session, settings), 0)
        session.query.assert_not_called()


class TestTokenCleanupMocked(unittest.TestCase):
    """run_token_cleanup returns whatever the DELETE reports and commits once."""

    def test_deletes_and_commits(self) -> None:
        settings = MagicMock()
        settings.TOKEN_CLEANUP_ENABLED = True
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 3
        self.assertEqual(run_token_cleanup(session, settings), 3)
        session.commit.assert_called_once()


class TestTokenCleanupIntegration(unittest.TestCase):
    """Against in-memory SQLite: only rows past expiry are removed."""

    def setUp(self) -> None:
        self.settings = make_settings()
        self.session = make_session(self.settings)
        user = users.create(
            self.session,
            email="ann@x.com",
            password_hash=hash_password("Passw0rd", 4),
            name="Ann",
        )
        self.now = datetime.now(UTC)
        refresh_tokens.create(self.session, user.id, "expired-1", self.now - timedelta(days=1))
        refresh_tokens.create(self.session, user.id, "expired-2", self.now - timedelta(minutes=1))
        refresh_tokens.create(self.session, user.id, "live", self.now + timedelta(days=1))
        refresh_tokens.revoke(self.session, "expired-2")

    def tearDown(self) -> None:
        self.session.close()

    def test_removes_only_expired_rows(self) -> None:
        self.assertEqual(run_token_cleanup(self.session, self.settings, now=self.now), 2)
        remaining = self.session.query(RefreshToken).all()
        self.assertEqual([r.token_hash for r in remaining], [refresh_tokens.hash_token("live")])
        self.assertIsNotNone(refresh_tokens.find_active(self.session, "live"))

    def test_idempotent(self) -> None:
        run_token_cleanup(self.session, self.settings, now=self.now)
        self.assertEqual(run_token_cleanup(self.session, self.settings, now=self.now), 0)


class TestTokenCleanupCommand(unittest.TestCase):
    def test_exit_codes(self) -> None:
        with patch.object(token_cleanup, "get_settings", return_value=make_settings()):
            with patch.object(token_cleanup, "run_token_cleanup", return_value=0):
                self.assertEqual(token_cleanup.main(), 0)
            with patch.object(token_cleanup, "run_token_cleanup", side_effect=RuntimeError("db down")):
                with self.assertLogs("app.token_cleanup", level="ERROR"):
                    self.assertEqual(token_cleanup.main(), 1)


if __name__ == "__main__":
    unittest.main()
