"""Configuration data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ArchiverConfig:
    """Process configuration settings."""
    # Provider settings
    provider_url: str = "https://api.trafikinfo.trafikverket.se/v2/data.json"
    provider_api_key: str = ""
    provider_schema_version: str = "1"
    provider_result_limit: int = 10
    photo_size_query: str = "type=fullsize"
    request_timeout_seconds: float = 10.0

    # Polling settings
    poll_interval_seconds: float = 5.0
    max_poll_workers: int = 8

    # Storage settings
    s3_bucket: str = ""
    s3_region: Optional[str] = None
    camera_list_key: str = "config.json"
    camera_list_refresh_seconds: float = 60.0
    camera_list_max_stale_seconds: Optional[float] = None  # None serves a stale list indefinitely
    archive_prefix: str = "photos"
    max_archive_workers: int = 4

    # Web settings
    http_host: str = "0.0.0.0"
    http_port: int = 3000

    # Logging settings
    log_level: str = "INFO"
    log_dir: str = "logs"
