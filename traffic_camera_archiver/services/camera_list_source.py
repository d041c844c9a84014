"""Camera list read from object storage with a time-windowed cache."""

import json
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..logging_config import get_logger
from .error_handler import ErrorHandler, ErrorSeverity
from .errors import ConfigurationError, StorageUnavailable
from .interfaces import CameraListSourceInterface

logger = get_logger("camera_list_source")


class S3CameraListSource(CameraListSourceInterface):
    """Reads a JSON array of camera ids from ``<bucket>/<key>``.

    A list younger than ``refresh_seconds`` is returned without a remote
    call. When a refresh fails the previous list keeps being served; if
    ``max_stale_seconds`` is set, a list older than that raises instead.
    """

    def __init__(self,
                 s3_client: Any,
                 bucket: str,
                 key: str = "config.json",
                 refresh_seconds: float = 60.0,
                 max_stale_seconds: Optional[float] = None,
                 error_handler: Optional[ErrorHandler] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.s3_client = s3_client
        self.error_handler = error_handler
        self.bucket = bucket
        self.key = key
        self.refresh_seconds = refresh_seconds
        self.max_stale_seconds = max_stale_seconds
        self._clock = clock

        self._camera_ids: Optional[List[str]] = None
        self._loaded_at: Optional[float] = None
        self._lock = threading.Lock()

        self.refresh_count = 0
        self.refresh_failures = 0
        self.last_error: Optional[str] = None

    def load(self) -> List[str]:
        """Read the camera list now; raises StorageUnavailable or ConfigurationError."""
        with self._lock:
            return list(self._refresh())

    def get_camera_ids(self) -> List[str]:
        with self._lock:
            now = self._clock()

            if self._camera_ids is not None and now - self._loaded_at < self.refresh_seconds:
                return list(self._camera_ids)

            try:
                return list(self._refresh())
            except (StorageUnavailable, ConfigurationError) as e:
                self.refresh_failures += 1
                self.last_error = str(e)

                if self._camera_ids is None:
                    raise

                age = now - self._loaded_at
                if self.max_stale_seconds is not None and age > self.max_stale_seconds:
                    raise StorageUnavailable(
                        f"Camera list is {age:.0f}s old and refresh keeps failing: {e}"
                    ) from e

                if self.error_handler is not None:
                    self.error_handler.handle_error("camera_list_source", e, ErrorSeverity.LOW,
                                                    context=f"serving list from {age:.0f}s ago")
                else:
                    logger.warning(f"Camera list refresh failed, serving list from {age:.0f}s ago: {e}")
                return list(self._camera_ids)

    def _refresh(self) -> List[str]:
        camera_ids = self._parse(self._read_document())
        self._camera_ids = camera_ids
        self._loaded_at = self._clock()
        self.refresh_count += 1
        self.last_error = None
        logger.debug(f"Loaded {len(camera_ids)} camera ids from s3://{self.bucket}/{self.key}")
        return camera_ids

    def _read_document(self) -> bytes:
        try:
            response = self.s3_client.get_object(Bucket=self.bucket, Key=self.key)
            return response["Body"].read()
        except (BotoCoreError, ClientError) as e:
            raise StorageUnavailable(f"Failed to read s3://{self.bucket}/{self.key}: {e}") from e

    def _parse(self, document: bytes) -> List[str]:
        try:
            data = json.loads(document)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Camera list s3://{self.bucket}/{self.key} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise ConfigurationError(f"Camera list must be a JSON array, got {type(data).__name__}")

        camera_ids: List[str] = []
        for entry in data:
            if isinstance(entry, bool) or not isinstance(entry, (str, int)):
                raise ConfigurationError(f"Invalid camera id in list: {entry!r}")
            camera_id = str(entry).strip()
            if camera_id and camera_id not in camera_ids:
                camera_ids.append(camera_id)
        return camera_ids

    def get_source_info(self) -> Dict[str, Any]:
        with self._lock:
            age = None if self._loaded_at is None else self._clock() - self._loaded_at
            return {
                "location": f"s3://{self.bucket}/{self.key}",
                "camera_count": len(self._camera_ids or []),
                "age_seconds": age,
                "refresh_count": self.refresh_count,
                "refresh_failures": self.refresh_failures,
                "last_error": self.last_error
            }
