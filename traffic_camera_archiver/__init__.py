"""
Traffic Camera Archiver

Polls the Trafikverket camera API, archives every new photo to S3 and
serves the latest frame per camera over HTTP.
"""

__version__ = "1.0.0"

from .config_manager import ConfigManager
from .models import (
    CameraSnapshot,
    CachedImage,
    Verdict,
    CameraPollOutcome,
    TickResult,
    ArchiverConfig
)
from .services import (
    CameraProviderInterface,
    ImageCacheInterface,
    ArchiveServiceInterface,
    CameraListSourceInterface,
    ArchiverError,
    ProviderUnavailable,
    StorageUnavailable,
    ConfigurationError
)

__all__ = [
    # Core management
    'ConfigManager',

    # Data models
    'CameraSnapshot',
    'CachedImage',
    'Verdict',
    'CameraPollOutcome',
    'TickResult',
    'ArchiverConfig',

    # Service interfaces
    'CameraProviderInterface',
    'ImageCacheInterface',
    'ArchiveServiceInterface',
    'CameraListSourceInterface',

    # Errors
    'ArchiverError',
    'ProviderUnavailable',
    'StorageUnavailable',
    'ConfigurationError'
]
