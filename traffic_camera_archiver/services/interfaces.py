"""Service interfaces and abstract base classes."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models.camera import CameraSnapshot, CachedImage, Verdict


class CameraProviderInterface(ABC):
    """Interface for the camera query API client."""

    @abstractmethod
    def fetch_by_id(self, camera_id: str) -> Optional[CameraSnapshot]:
        """Fetch one camera by id; None if the provider has no such camera."""
        pass

    @abstractmethod
    def search_by_name(self, text: str) -> List[CameraSnapshot]:
        """Search cameras by name; an empty list if nothing matched."""
        pass

    @abstractmethod
    def download_photo(self, snapshot: CameraSnapshot) -> bytes:
        """Download the full-size photo for a snapshot."""
        pass


class ImageCacheInterface(ABC):
    """Interface for the per-camera change detector and cache."""

    @abstractmethod
    def has_timestamp(self, camera_id: str, captured_at: datetime) -> bool:
        """Check if the cached entry already carries this capture time."""
        pass

    @abstractmethod
    def evaluate(self, camera_id: str, snapshot: CameraSnapshot, image_bytes: bytes) -> Verdict:
        """Decide whether the image is new and commit it if so."""
        pass

    @abstractmethod
    def get(self, camera_id: str) -> Optional[CachedImage]:
        """Get the latest cached image for a camera."""
        pass


class ArchiveServiceInterface(ABC):
    """Interface for durable photo archival."""

    @abstractmethod
    def store(self, camera_id: str, timestamp: datetime, image_bytes: bytes) -> str:
        """Persist a photo and return its storage key."""
        pass

    @abstractmethod
    def get_archive_info(self) -> Dict[str, Any]:
        """Get archival counters for status reporting."""
        pass


class CameraListSourceInterface(ABC):
    """Interface for the list of camera ids to poll."""

    @abstractmethod
    def load(self) -> List[str]:
        """Read the camera list, raising on any failure."""
        pass

    @abstractmethod
    def get_camera_ids(self) -> List[str]:
        """Get the camera list, refreshing it when the cache window has elapsed."""
        pass

    @abstractmethod
    def get_source_info(self) -> Dict[str, Any]:
        """Get list location, age and refresh counters for status reporting."""
        pass
