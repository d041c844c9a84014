"""Services for the traffic camera archiver."""

from .interfaces import (
    CameraProviderInterface,
    ImageCacheInterface,
    ArchiveServiceInterface,
    CameraListSourceInterface
)
from .errors import ArchiverError, ProviderUnavailable, StorageUnavailable, ConfigurationError

__all__ = [
    'CameraProviderInterface',
    'ImageCacheInterface',
    'ArchiveServiceInterface',
    'CameraListSourceInterface',
    'ArchiverError',
    'ProviderUnavailable',
    'StorageUnavailable',
    'ConfigurationError'
]
