import unittest

from drivekeeper.auth import AuthInfo


class TestAuthInfo(unittest.TestCase):
    def test_auth_info_valid_firebase(self) -> None:
        info = AuthInfo(
            kind="firebase",
            data={
                "api_key": "AIza-test",
                "project_id": "drive-test",
                "client_secrets_file": "/tmp/client_secrets.json",
            },
        )
        self.assertEqual(info.kind, "firebase")
        self.assertEqual(info.api_key, "AIza-test")
        self.assertEqual(info.project_id, "drive-test")
        self.assertEqual(info.client_secrets_file, "/tmp/client_secrets.json")
        self.assertIsNone(info.token_file)

    def test_auth_info_invalid_kind(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="oauth", data={"api_key": "k", "project_id": "p"})

    def test_auth_info_missing_keys(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="firebase", data={"api_key": "k"})
        with self.assertRaises(ValueError):
            AuthInfo(kind="firebase", data={"api_key": " ", "project_id": "p"})

    def test_auth_info_data_must_be_dict(self) -> None:
        with self.assertRaises(TypeError):
            AuthInfo(kind="firebase", data=[("api_key", "k")])  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
