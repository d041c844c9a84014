"""Data models for the traffic camera archiver."""

from .camera import CameraSnapshot, CachedImage, Verdict, CameraPollOutcome, TickResult
from .config import ArchiverConfig

__all__ = ['CameraSnapshot', 'CachedImage', 'Verdict', 'CameraPollOutcome', 'TickResult', 'ArchiverConfig']
