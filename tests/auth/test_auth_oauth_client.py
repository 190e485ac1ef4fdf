import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from drivekeeper.auth import AuthInfo, GoogleSignIn
from drivekeeper.errors import AuthError, ValidationError


def _info(**extra) -> AuthInfo:
    data = {"api_key": "k", "project_id": "p"}
    data.update(extra)
    return AuthInfo(kind="firebase", data=data)


class TestGoogleSignIn(unittest.TestCase):
    def test_requires_client_secrets(self) -> None:
        with self.assertRaises(ValidationError):
            GoogleSignIn(_info())

    def test_flow_runs_and_token_is_saved(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            token_file = tmp_path / "nested" / "token.json"
            client = GoogleSignIn(
                _info(
                    client_secrets_file=str(tmp_path / "client_secrets.json"),
                    token_file=str(token_file),
                )
            )
            creds = Mock()
            creds.id_token = "google-id-token"
            creds.to_json.return_value = json.dumps({"token": "t"})

            with patch(
                "google_auth_oauthlib.flow.InstalledAppFlow.from_client_secrets_file"
            ) as from_file:
                from_file.return_value.run_local_server.return_value = creds
                token = client.get_id_token()

            self.assertEqual(token, "google-id-token")
            self.assertEqual(json.loads(token_file.read_text(encoding="utf-8")), {"token": "t"})
            scopes = from_file.call_args.kwargs["scopes"]
            self.assertIn("openid", scopes)

    def test_flow_failure_is_auth_error(self) -> None:
        client = GoogleSignIn(_info(client_secrets_file="/nonexistent/secrets.json"))
        with patch(
            "google_auth_oauthlib.flow.InstalledAppFlow.from_client_secrets_file",
            side_effect=FileNotFoundError("missing"),
        ):
            with self.assertRaises(AuthError):
                client.get_credentials()

    def test_missing_id_token_is_auth_error(self) -> None:
        client = GoogleSignIn(_info(client_secrets_file="/tmp/secrets.json"))
        creds = Mock()
        creds.id_token = None
        with patch.object(GoogleSignIn, "get_credentials", return_value=creds):
            with self.assertRaises(AuthError):
                client.get_id_token()


if __name__ == "__main__":
    unittest.main()
