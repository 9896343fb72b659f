"""Tests for the create_user, purge_sessions and development-server entrypoints."""

import os
import tempfile
import unittest
from unittest.mock import patch

from slamdash import main, purge_sessions
from slamdash.core.database import create_db_engine, create_session_factory, init_db
from slamdash.scripts import create_user
from slamdash.services.credentials import CredentialStore
from tests.support import TEST_BCRYPT_ROUNDS, make_settings


class ScriptTestCase(unittest.TestCase):
    """Each test gets its own SQLite file so the CLI's engine and ours see the same data."""

    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.settings = make_settings(
            DATABASE_URL=f"sqlite:///{os.path.join(tmpdir.name, 'slam.db')}"
        )

    def _store(self) -> CredentialStore:
        engine = create_db_engine(self.settings.DATABASE_URL)
        self.addCleanup(engine.dispose)
        return CredentialStore(create_session_factory(engine), bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@patch("slamdash.scripts.create_user.get_settings")
class TestCreateUser(ScriptTestCase):
    def test_creates_account_with_role(self, mock_settings) -> None:
        mock_settings.return_value = self.settings
        code = create_user.main(["alice", "alice@slam.local", "alice-password", "manager"])
        self.assertEqual(code, 0)
        account = self._store().verify("alice", "alice-password")
        self.assertEqual(account.role, "manager")

    def test_default_role_is_viewer(self, mock_settings) -> None:
        mock_settings.return_value = self.settings
        self.assertEqual(create_user.main(["vic", "vic@slam.local", "vic-password"]), 0)
        self.assertEqual(self._store().verify("vic", "vic-password").role, "viewer")

    def test_duplicate_username_fails(self, mock_settings) -> None:
        mock_settings.return_value = self.settings
        self.assertEqual(create_user.main(["bob", "bob@slam.local", "bob-password"]), 0)
        self.assertEqual(create_user.main(["bob", "bob2@slam.local", "bob-password"]), 1)

    def test_short_password_fails(self, mock_settings) -> None:
        mock_settings.return_value = self.settings
        self.assertEqual(create_user.main(["bob", "bob@slam.local", "short"]), 1)

    def test_bad_email_fails(self, mock_settings) -> None:
        mock_settings.return_value = self.settings
        self.assertEqual(create_user.main(["bob", "not-an-email", "bob-password"]), 1)


class TestPurgeSessionsCli(ScriptTestCase):
    def test_runs_against_empty_store(self) -> None:
        engine = create_db_engine(self.settings.DATABASE_URL)
        init_db(engine)
        engine.dispose()
        with patch("slamdash.purge_sessions.get_settings", return_value=self.settings):
            self.assertEqual(purge_sessions.main(), 0)

    def test_missing_tables_reports_failure(self) -> None:
        with patch("slamdash.purge_sessions.get_settings", return_value=self.settings):
            self.assertEqual(purge_sessions.main(), 1)


class TestRunServer(unittest.TestCase):
    @patch("uvicorn.run")
    def test_serves_app_on_configured_address(self, run) -> None:
        main.run_server(make_settings(SERVER_HOST="0.0.0.0", SERVER_PORT=9000))
        run.assert_called_once_with(
            "slamdash.main:app", host="0.0.0.0", port=9000, reload=False
        )

    @patch("uvicorn.run")
    def test_reload_only_for_dev_debug(self, run) -> None:
        main.run_server(make_settings(APP_ENV="dev", DEBUG=True))
        self.assertTrue(run.call_args.kwargs["reload"])


if __name__ == "__main__":
    unittest.main()
