"""Unit tests for S3 photo archival."""

import unittest
from datetime import datetime, timezone, timedelta
from unittest.mock import Mock
import sys
import os

from botocore.exceptions import ClientError, EndpointConnectionError

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from traffic_camera_archiver.services.archive_service import S3ArchiveService
from traffic_camera_archiver.services.errors import StorageUnavailable


T0 = datetime(2023, 10, 18, 10, 33, 56, 120000, tzinfo=timezone.utc)


class TestS3ArchiveService(unittest.TestCase):
    """Test cases for S3ArchiveService."""

    def setUp(self):
        """Set up test fixtures."""
        self.s3_client = Mock()
        self.service = S3ArchiveService(self.s3_client, bucket="camera-archive")

    def test_build_key(self):
        """Test the photos/<camera>/<date>/<timestamp>.jpg layout."""
        key = self.service.build_key("A1", T0)
        self.assertEqual(key, "photos/A1/2023-10-18/2023-10-18T10-33-56.120Z.jpg")

    def test_build_key_uses_utc_date(self):
        """Test that date and time come from the UTC capture time."""
        local = datetime(2023, 10, 19, 0, 30, tzinfo=timezone(timedelta(hours=2)))
        key = self.service.build_key("A1", local)
        self.assertEqual(key, "photos/A1/2023-10-18/2023-10-18T22-30-00.000Z.jpg")

    def test_build_key_custom_prefix(self):
        """Test a custom and an empty prefix."""
        self.assertTrue(S3ArchiveService(self.s3_client, "b", prefix="/archive/").build_key("A1", T0)
                        .startswith("archive/A1/"))
        self.assertTrue(S3ArchiveService(self.s3_client, "b", prefix="").build_key("A1", T0)
                        .startswith("A1/2023-10-18/"))

    def test_store(self):
        """Test that store uploads a JPEG object and returns its key."""
        key = self.service.store("A1", T0, b"\xff\xd8jpeg")

        self.assertEqual(key, "photos/A1/2023-10-18/2023-10-18T10-33-56.120Z.jpg")
        self.s3_client.put_object.assert_called_once_with(
            Bucket="camera-archive",
            Key=key,
            Body=b"\xff\xd8jpeg",
            ContentType="image/jpeg"
        )
        self.assertEqual(self.service.stored_count, 1)
        self.assertEqual(self.service.bytes_stored, 6)

    def test_store_same_capture_same_key(self):
        """Test that re-storing a capture targets the same key."""
        first = self.service.store("A1", T0, b"b1")
        second = self.service.store("A1", T0, b"b1")
        self.assertEqual(first, second)

    def test_store_client_error(self):
        """Test that S3 client errors become StorageUnavailable."""
        self.s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )

        with self.assertRaises(StorageUnavailable):
            self.service.store("A1", T0, b"b1")
        self.assertEqual(self.service.failed_count, 1)
        self.assertEqual(self.service.stored_count, 0)

    def test_store_connection_error(self):
        """Test that connection errors become StorageUnavailable."""
        self.s3_client.put_object.side_effect = EndpointConnectionError(endpoint_url="https://s3.invalid")

        with self.assertRaises(StorageUnavailable):
            self.service.store("A1", T0, b"b1")

    def test_archive_info(self):
        """Test archive statistics."""
        self.service.store("A1", T0, b"1234")
        info = self.service.get_archive_info()

        self.assertEqual(info["bucket"], "camera-archive")
        self.assertEqual(info["stored_count"], 1)
        self.assertEqual(info["bytes_stored"], 4)


if __name__ == '__main__':
    unittest.main()
