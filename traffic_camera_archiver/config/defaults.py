"""Default configuration values and constants."""

from datetime import timedelta
from typing import Dict, Any

# Default process configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    # Provider settings
    "provider_url": "https://api.trafikinfo.trafikverket.se/v2/data.json",
    "provider_schema_version": "1",
    "provider_result_limit": 10,
    "photo_size_query": "type=fullsize",
    "request_timeout_seconds": 10.0,

    # Polling settings
    "poll_interval_seconds": 5.0,
    "max_poll_workers": 8,

    # Storage settings
    "camera_list_key": "config.json",
    "camera_list_refresh_seconds": 60.0,
    "camera_list_max_stale_seconds": None,
    "archive_prefix": "photos",
    "max_archive_workers": 4,

    # Web settings
    "http_host": "0.0.0.0",
    "http_port": 3000,

    # Logging settings
    "log_level": "INFO",
    "log_dir": "logs"
}

# The provider's PhotoTime lags the true capture time by one minute
PHOTO_TIME_CORRECTION = timedelta(minutes=1)

PROVIDER_CONSTANTS = {
    "OBJECT_TYPE": "Camera",
    "CONTENT_TYPE": "application/xml",
    "ID_FIELD": "Id",
    "NAME_FIELD": "Name",
}

ARCHIVE_CONTENT_TYPE = "image/jpeg"

# Environment variable -> (config field, type)
ENVIRONMENT_OVERRIDES = {
    "TRAFIKVERKET_API_KEY": ("provider_api_key", str),
    "S3_BUCKET": ("s3_bucket", str),
    "AWS_REGION": ("s3_region", str),
    "ARCHIVER_POLL_INTERVAL": ("poll_interval_seconds", float),
    "ARCHIVER_HTTP_PORT": ("http_port", int),
    "ARCHIVER_LOG_LEVEL": ("log_level", str),
    "ARCHIVER_LOG_DIR": ("log_dir", str),
}

DEFAULT_PATHS = {
    "config_file": "archiver_config.json",
    "env_file": ".env",
    "logs_dir": "logs"
}
