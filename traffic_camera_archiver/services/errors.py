"""Exception types raised by archiver services."""


class ArchiverError(Exception):
    """Base class for archiver failures."""


class ProviderUnavailable(ArchiverError):
    """Transport or protocol failure calling the camera query API."""


class StorageUnavailable(ArchiverError):
    """Object storage read or write failed."""


class ConfigurationError(ArchiverError):
    """Configuration is missing or malformed."""
