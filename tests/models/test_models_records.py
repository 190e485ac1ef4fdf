import unittest
from datetime import datetime, timezone

from drivekeeper.models import CurrentUser, FileRecord, FolderRecord, UploadItem


class TestRecords(unittest.TestCase):
    def test_file_record_defaults(self) -> None:
        dt = datetime(2025, 1, 1, tzinfo=timezone.utc)
        f = FileRecord(
            id="f1",
            name="a.png",
            content_type="image/png",
            size_bytes=10,
            url="https://example.com/a.png",
            parent_folder_id=None,
            owner_id="u1",
            created_at=dt,
            updated_at=dt,
        )
        self.assertFalse(f.starred)
        self.assertFalse(f.trashed)
        self.assertIsNone(f.parent_folder_id)

    def test_folder_record_defaults(self) -> None:
        dt = datetime(2025, 1, 1, tzinfo=timezone.utc)
        f = FolderRecord(
            id="d1",
            name="Work",
            parent_folder_id="d0",
            owner_id="u1",
            created_at=dt,
            updated_at=dt,
        )
        self.assertFalse(f.starred)
        self.assertFalse(f.trashed)
        self.assertEqual(f.parent_folder_id, "d0")

    def test_current_user_is_frozen(self) -> None:
        user = CurrentUser(id="u1", email="a@example.com", display_name="A")
        self.assertIsNone(user.photo_url)
        with self.assertRaises(Exception):
            user.id = "u2"  # type: ignore[misc]


class TestUploadItem(unittest.TestCase):
    def test_guesses_type_and_size(self) -> None:
        item = UploadItem(b"12345", "photo.png")
        self.assertEqual(item.content_type, "image/png")
        self.assertEqual(item.size_bytes, 5)

    def test_explicit_values_win(self) -> None:
        item = UploadItem(b"1", "blob", content_type="text/plain", size_bytes=99)
        self.assertEqual(item.content_type, "text/plain")
        self.assertEqual(item.size_bytes, 99)

    def test_unknown_extension_is_octet_stream(self) -> None:
        item = UploadItem(b"1", "noext")
        self.assertEqual(item.content_type, "application/octet-stream")


if __name__ == "__main__":
    unittest.main()
