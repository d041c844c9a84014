"""Photo archival to S3 object storage."""

import time
from datetime import datetime
from typing import Any, Dict

from botocore.exceptions import BotoCoreError, ClientError

from ..config.defaults import ARCHIVE_CONTENT_TYPE
from ..logging_config import get_logger
from ..utils import date_component, safe_timestamp
from .errors import StorageUnavailable
from .interfaces import ArchiveServiceInterface

logger = get_logger("archive_service")


class S3ArchiveService(ArchiveServiceInterface):
    """Stores new photos under photos/<camera>/<date>/<timestamp>.jpg."""

    def __init__(self, s3_client: Any, bucket: str, prefix: str = "photos"):
        """
        Initialize archive service.

        Args:
            s3_client: boto3 S3 client
            bucket: Destination bucket
            prefix: Top-level key prefix for archived photos
        """
        self.s3_client = s3_client
        self.bucket = bucket
        self.prefix = prefix.strip("/")

        self.stored_count = 0
        self.failed_count = 0
        self.bytes_stored = 0

    def build_key(self, camera_id: str, timestamp: datetime) -> str:
        """Deterministic object key; re-storing a capture overwrites the same key."""
        parts = [camera_id, date_component(timestamp), f"{safe_timestamp(timestamp)}.jpg"]
        if self.prefix:
            parts.insert(0, self.prefix)
        return "/".join(parts)

    def store(self, camera_id: str, timestamp: datetime, image_bytes: bytes) -> str:
        key = self.build_key(camera_id, timestamp)
        start_time = time.time()

        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=image_bytes,
                ContentType=ARCHIVE_CONTENT_TYPE
            )
        except (BotoCoreError, ClientError) as e:
            self.failed_count += 1
            raise StorageUnavailable(f"Failed to archive s3://{self.bucket}/{key}: {e}") from e

        self.stored_count += 1
        self.bytes_stored += len(image_bytes)

        upload_ms = (time.time() - start_time) * 1000
        logger.info(f"Archived {len(image_bytes)} bytes to s3://{self.bucket}/{key} in {upload_ms:.0f}ms")
        return key

    def get_archive_info(self) -> Dict[str, Any]:
        return {
            "bucket": self.bucket,
            "prefix": self.prefix,
            "stored_count": self.stored_count,
            "failed_count": self.failed_count,
            "bytes_stored": self.bytes_stored
        }
