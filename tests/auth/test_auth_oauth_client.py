import json
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials

from digipostefs.auth import AuthInfo, OAuthClient
from digipostefs.errors import AuthError


class TestOAuthClient(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.token_file = Path(self._tmp.name) / "token.json"
        self.client = OAuthClient(AuthInfo(kind="token", data={"token_file": str(self.token_file)}))

    def _write_token(self, **overrides) -> None:
        payload = {
            "token": "fake-token",
            "refresh_token": "fake-refresh-token",
            "token_uri": "https://api.example.test/oauth/token",
            "client_id": "fake-client-id",
            "client_secret": "fake-client-secret",
            "expiry": "2999-01-01T00:00:00Z",
        }
        payload.update(overrides)
        self.token_file.write_text(json.dumps(payload), encoding="utf-8")

    def test_get_credentials_loads_token_file_without_refresh(self) -> None:
        self._write_token()

        creds = self.client.get_credentials(ensure_valid=False)

        self.assertEqual(creds.token, "fake-token")
        self.assertEqual(creds.refresh_token, "fake-refresh-token")

    def test_valid_token_is_not_refreshed(self) -> None:
        self._write_token()

        with patch.object(Credentials, "refresh") as refresh:
            creds = self.client.get_credentials()

        refresh.assert_not_called()
        self.assertTrue(creds.valid)

    def test_expired_token_is_refreshed_and_saved(self) -> None:
        self._write_token(expiry="2000-01-01T00:00:00Z")

        def fake_refresh(creds, request):
            creds.token = "new-token"
            creds.expiry = datetime(2999, 1, 1)

        with patch.object(Credentials, "refresh", autospec=True, side_effect=fake_refresh):
            creds = self.client.get_credentials()

        self.assertEqual(creds.token, "new-token")
        saved = json.loads(self.token_file.read_text(encoding="utf-8"))
        self.assertEqual(saved["token"], "new-token")

    def test_refresh_failure_is_auth_error(self) -> None:
        self._write_token(expiry="2000-01-01T00:00:00Z")

        with patch.object(Credentials, "refresh", side_effect=RefreshError("revoked")):
            with self.assertRaises(AuthError):
                self.client.get_credentials()

    def test_expired_token_without_refresh_token(self) -> None:
        self._write_token(expiry="2000-01-01T00:00:00Z", refresh_token=None)

        with self.assertRaises(AuthError):
            self.client.get_credentials()

    def test_missing_token_file(self) -> None:
        with self.assertRaises(AuthError) as ctx:
            self.client.get_credentials()
        self.assertEqual(ctx.exception.details["token_file"], str(self.token_file))

    def test_malformed_token_file(self) -> None:
        self.token_file.write_text("{not json", encoding="utf-8")

        with self.assertRaises(AuthError):
            self.client.get_credentials(ensure_valid=False)

    def test_token_file_without_access_token(self) -> None:
        self._write_token(token=None)

        with self.assertRaises(AuthError):
            self.client.get_credentials(ensure_valid=False)


if __name__ == "__main__":
    unittest.main()
