import unittest
from unittest.mock import Mock

from drivekeeper.config import DriveKeeperConfig
from drivekeeper.errors import SizeExceededError, TransferError, ValidationError
from drivekeeper.storage import BlobStore
from drivekeeper.storage.blob_store import public_id_from_url, resource_type_from_url


def _config(**overrides) -> DriveKeeperConfig:
    values = dict(
        supabase_url="https://x.supabase.co",
        supabase_key="k",
        cloudinary_cloud_name="demo",
        cloudinary_api_key="key",
        cloudinary_api_secret="secret",
    )
    values.update(overrides)
    return DriveKeeperConfig(**values)


class TestPublicIdFromUrl(unittest.TestCase):
    def test_strips_version_and_extension(self) -> None:
        url = "https://res.cloudinary.com/demo/image/upload/v17/drive/u1/170_a.png"
        self.assertEqual(public_id_from_url(url), "drive/u1/170_a")

    def test_without_version_segment(self) -> None:
        url = "https://res.cloudinary.com/demo/raw/upload/drive/170_report.pdf"
        self.assertEqual(public_id_from_url(url), "drive/170_report")

    def test_without_marker_uses_last_segment(self) -> None:
        self.assertEqual(public_id_from_url("https://cdn.example.com/x/y/abc.jpg"), "abc")

    def test_percent_encoded_name_is_decoded(self) -> None:
        url = "https://res.cloudinary.com/demo/image/upload/v1/drive/u1/170_My%20Report.png"
        self.assertEqual(public_id_from_url(url), "drive/u1/170_My Report")

    def test_non_ascii_name_is_decoded(self) -> None:
        url = "https://res.cloudinary.com/demo/raw/upload/v1/drive/u1/170_%E8%B3%87%E6%96%99.pdf"
        self.assertEqual(public_id_from_url(url), "drive/u1/170_\u8cc7\u6599")

    def test_empty_url_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            public_id_from_url("")

    def test_resource_type(self) -> None:
        self.assertEqual(
            resource_type_from_url("https://res.cloudinary.com/demo/raw/upload/v1/a/b.txt"),
            "raw",
        )
        self.assertEqual(resource_type_from_url("https://cdn.example.com/a/doc.pdf"), "raw")
        self.assertEqual(resource_type_from_url("https://cdn.example.com/a/pic.png"), "image")


class TestBlobStorePut(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.uploader = Mock()
        self.uploader.upload.return_value = {
            "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/drive/u1/1_a.png"
        }
        self.store = BlobStore(_config(), uploader=self.uploader)

    async def test_put_returns_secure_url(self) -> None:
        url = await self.store.put(b"abc", "a.png", "image/png", folder="u1")

        self.assertTrue(url.startswith("https://"))
        args, kwargs = self.uploader.upload.call_args
        self.assertTrue(args[0].startswith("data:image/png;base64,"))
        self.assertEqual(kwargs["folder"], "drive/u1")
        self.assertEqual(kwargs["resource_type"], "auto")
        self.assertTrue(kwargs["public_id"].endswith("_a"))
        self.assertEqual(kwargs["cloud_name"], "demo")
        self.assertEqual(kwargs["api_secret"], "secret")

    async def test_pdf_is_stored_as_raw(self) -> None:
        await self.store.put(b"%PDF", "doc.pdf", "application/pdf")
        kwargs = self.uploader.upload.call_args.kwargs
        self.assertEqual(kwargs["resource_type"], "raw")
        self.assertEqual(kwargs["folder"], "drive")

    async def test_empty_payload_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            await self.store.put(b"", "a.png", "image/png")
        self.uploader.upload.assert_not_called()

    async def test_over_cap_is_rejected_before_transfer(self) -> None:
        store = BlobStore(_config(max_upload_bytes=4), uploader=self.uploader)
        with self.assertRaises(SizeExceededError):
            await store.put(b"12345", "a.png", "image/png")
        self.uploader.upload.assert_not_called()

    async def test_vendor_failure_is_transfer_error(self) -> None:
        self.uploader.upload.side_effect = RuntimeError("boom")
        with self.assertRaises(TransferError) as ctx:
            await self.store.put(b"abc", "a.png", "image/png")
        self.assertEqual(str(ctx.exception), "Failed to upload file")

    async def test_vendor_size_rejection_is_size_exceeded(self) -> None:
        self.uploader.upload.side_effect = Exception(
            "File size too large. Got 12000000. Maximum is 10485760."
        )
        with self.assertRaises(SizeExceededError) as ctx:
            await self.store.put(b"abc", "a.png", "image/png")
        self.assertIsInstance(ctx.exception.__cause__, Exception)
        self.assertIn("5 MB", str(ctx.exception))

    async def test_missing_url_is_transfer_error(self) -> None:
        self.uploader.upload.return_value = {}
        with self.assertRaises(TransferError):
            await self.store.put(b"abc", "a.png", "image/png")


class TestBlobStoreRemove(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.uploader = Mock()
        self.store = BlobStore(_config(), uploader=self.uploader)
        self.url = "https://res.cloudinary.com/demo/image/upload/v17/drive/u1/170_a.png"

    async def test_remove_ok(self) -> None:
        self.uploader.destroy.return_value = {"result": "ok"}
        result = await self.store.remove(self.url)

        self.assertTrue(result.ok)
        args, kwargs = self.uploader.destroy.call_args
        self.assertEqual(args[0], "drive/u1/170_a")
        self.assertEqual(kwargs["resource_type"], "image")

    async def test_remove_not_found_counts_as_removed(self) -> None:
        self.uploader.destroy.return_value = {"result": "not found"}
        result = await self.store.remove(self.url)
        self.assertTrue(result.ok)

    async def test_remove_decodes_stored_name(self) -> None:
        self.uploader.destroy.return_value = {"result": "ok"}
        url = "https://res.cloudinary.com/demo/image/upload/v17/drive/u1/170_My%20Report.png"

        await self.store.remove(url)

        self.assertEqual(self.uploader.destroy.call_args.args[0], "drive/u1/170_My Report")

    async def test_remove_failure_is_reported_not_raised(self) -> None:
        self.uploader.destroy.side_effect = RuntimeError("boom")
        result = await self.store.remove(self.url)
        self.assertFalse(result.ok)
        self.assertEqual(result.status, "error")
        self.assertEqual(result.message, "Failed to delete file")

    async def test_remove_unexpected_result(self) -> None:
        self.uploader.destroy.return_value = {"result": "error"}
        result = await self.store.remove(self.url)
        self.assertFalse(result.ok)


if __name__ == "__main__":
    unittest.main()
