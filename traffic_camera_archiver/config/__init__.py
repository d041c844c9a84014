"""Configuration components for the traffic camera archiver."""

from .defaults import (
    DEFAULT_CONFIG,
    PHOTO_TIME_CORRECTION,
    PROVIDER_CONSTANTS,
    ARCHIVE_CONTENT_TYPE,
    ENVIRONMENT_OVERRIDES,
    DEFAULT_PATHS
)

__all__ = [
    'DEFAULT_CONFIG',
    'PHOTO_TIME_CORRECTION',
    'PROVIDER_CONSTANTS',
    'ARCHIVE_CONTENT_TYPE',
    'ENVIRONMENT_OVERRIDES',
    'DEFAULT_PATHS'
]
