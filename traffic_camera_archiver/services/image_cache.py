"""Per-camera change detection and latest-image cache."""

import threading
from datetime import datetime
from typing import Dict, List, Optional

from ..logging_config import get_logger
from ..models.camera import CameraSnapshot, CachedImage, Verdict
from .interfaces import ImageCacheInterface

logger = get_logger("image_cache")


class ImageCache(ImageCacheInterface):
    """Latest image per camera, replaced only when a new capture is detected.

    Change detection is two-stage: a capture timestamp equal to the cached one
    means the image is unchanged, and so do bytes identical to the cached
    bytes. Only when both differ is the entry replaced. An unchanged verdict
    never mutates the entry, so its timestamp stays the one the bytes were
    first seen with.

    Entries are immutable and swapped whole, so readers never need the lock.
    """

    def __init__(self):
        self._entries: Dict[str, CachedImage] = {}
        self._lock = threading.Lock()

    def get(self, camera_id: str) -> Optional[CachedImage]:
        return self._entries.get(camera_id)

    def has_timestamp(self, camera_id: str, captured_at: datetime) -> bool:
        cached = self._entries.get(camera_id)
        return cached is not None and cached.timestamp == captured_at

    def evaluate(self, camera_id: str, snapshot: CameraSnapshot, image_bytes: bytes) -> Verdict:
        with self._lock:
            cached = self._entries.get(camera_id)

            if cached is not None:
                if cached.timestamp == snapshot.captured_at:
                    logger.debug(f"No new image for {camera_id}, timestamp unchanged")
                    return Verdict.UNCHANGED

                if cached.image_bytes == image_bytes:
                    logger.debug(f"No new image for {camera_id}, bytes unchanged")
                    return Verdict.UNCHANGED

            self._entries[camera_id] = CachedImage(
                camera_id=camera_id,
                timestamp=snapshot.captured_at,
                image_bytes=bytes(image_bytes)
            )

        logger.info(f"New image for {camera_id} captured at {snapshot.captured_at.isoformat()}")
        return Verdict.NEW

    def camera_ids(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, camera_id: object) -> bool:
        return camera_id in self._entries
