"""Camera data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..utils import iso_timestamp


@dataclass(frozen=True)
class CameraSnapshot:
    """One provider-reported camera record at a point in time."""
    id: str
    name: str
    location: Any
    description: str
    photo_url: str
    captured_at: datetime  # provider PhotoTime minus the correction offset

    def to_dict(self) -> Dict[str, Any]:
        """Render as the JSON shape returned by the search endpoint."""
        return {
            'id': self.id,
            'name': self.name,
            'location': self.location,
            'description': self.description,
            'photoUrl': self.photo_url,
            'capturedAt': iso_timestamp(self.captured_at),
        }


@dataclass(frozen=True)
class CachedImage:
    """Latest known image for one camera."""
    camera_id: str
    timestamp: datetime
    image_bytes: bytes


class Verdict(Enum):
    """Outcome of change detection for one fetch."""
    NEW = "new"
    UNCHANGED = "unchanged"


class CameraPollOutcome(Enum):
    """Outcome of one camera's fetch/detect/archive chain within a tick."""
    NEW = "new"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass
class TickResult:
    """Counters for one poll tick."""
    started_at: datetime
    camera_count: int = 0
    new: int = 0
    unchanged: int = 0
    not_found: int = 0
    failed: int = 0
    duration_seconds: float = 0.0
    error: Optional[str] = None

    def record(self, outcome: CameraPollOutcome) -> None:
        if outcome is CameraPollOutcome.NEW:
            self.new += 1
        elif outcome is CameraPollOutcome.UNCHANGED:
            self.unchanged += 1
        elif outcome is CameraPollOutcome.NOT_FOUND:
            self.not_found += 1
        else:
            self.failed += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'started_at': self.started_at.isoformat(),
            'camera_count': self.camera_count,
            'new': self.new,
            'unchanged': self.unchanged,
            'not_found': self.not_found,
            'failed': self.failed,
            'duration_seconds': self.duration_seconds,
            'error': self.error,
        }
