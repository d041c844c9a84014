"""Configuration management: defaults, optional JSON file, environment overrides."""

import json
import os
from dataclasses import asdict, fields
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .config.defaults import DEFAULT_CONFIG, DEFAULT_PATHS, ENVIRONMENT_OVERRIDES
from .logging_config import get_logger
from .models.config import ArchiverConfig
from .services.errors import ConfigurationError

logger = get_logger("config_manager")


class ConfigManager:
    """Builds the process configuration.

    Values are layered: built-in defaults, then the JSON config file if it
    exists, then environment variables (a ``.env`` file is loaded first and
    never overrides variables already set in the process environment).
    """

    def __init__(self, config_path: Optional[str] = None,
                 env_file: Optional[str] = None,
                 environ: Optional[Dict[str, str]] = None):
        self.config_path = config_path or DEFAULT_PATHS["config_file"]
        self.env_file = env_file or DEFAULT_PATHS["env_file"]
        self._environ = environ
        self._config: Optional[ArchiverConfig] = None

        self.load_config()

    def load_config(self) -> ArchiverConfig:
        """Load configuration from defaults, file and environment."""
        values: Dict[str, Any] = dict(DEFAULT_CONFIG)
        values.update(self._read_config_file())
        values.update(self._read_environment())

        known = {f.name for f in fields(ArchiverConfig)}
        self._config = ArchiverConfig(**{k: v for k, v in values.items() if k in known})
        return self._config

    def _read_config_file(self) -> Dict[str, Any]:
        if not os.path.exists(self.config_path):
            return {}

        try:
            with open(self.config_path, 'r') as f:
                config_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Error loading config file {self.config_path}: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Config file {self.config_path} must contain a JSON object")

        known = {f.name for f in fields(ArchiverConfig)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

        logger.info(f"Loaded configuration file {self.config_path}")
        return {k: v for k, v in config_dict.items() if k in known}

    def _read_environment(self) -> Dict[str, Any]:
        if self._environ is None:
            if os.path.exists(self.env_file):
                load_dotenv(self.env_file, override=False)
            environ = os.environ
        else:
            environ = self._environ

        overrides: Dict[str, Any] = {}
        for variable, (field_name, cast) in ENVIRONMENT_OVERRIDES.items():
            raw = environ.get(variable)
            if raw is None or raw == "":
                continue
            try:
                overrides[field_name] = cast(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {variable}: {raw!r}") from e
        return overrides

    def get_config(self) -> ArchiverConfig:
        """Get current configuration."""
        if self._config is None:
            return self.load_config()
        return self._config

    def validate_config(self) -> List[str]:
        """Validate current configuration; returns a list of problems."""
        config = self.get_config()
        problems: List[str] = []

        if not config.provider_api_key:
            problems.append("provider_api_key is not set (TRAFIKVERKET_API_KEY)")

        if not config.s3_bucket:
            problems.append("s3_bucket is not set (S3_BUCKET)")

        if not config.provider_url.startswith(("http://", "https://")):
            problems.append(f"provider_url must be an http(s) URL: {config.provider_url}")

        if config.provider_result_limit < 1:
            problems.append("provider_result_limit must be at least 1")

        if config.request_timeout_seconds <= 0:
            problems.append("request_timeout_seconds must be positive")

        if config.poll_interval_seconds <= 0:
            problems.append("poll_interval_seconds must be positive")

        if config.max_poll_workers < 1 or config.max_archive_workers < 1:
            problems.append("worker pool sizes must be at least 1")

        if config.camera_list_refresh_seconds < 0:
            problems.append("camera_list_refresh_seconds must not be negative")

        if (config.camera_list_max_stale_seconds is not None and
                config.camera_list_max_stale_seconds < config.camera_list_refresh_seconds):
            problems.append("camera_list_max_stale_seconds must not be shorter than the refresh window")

        if not 0 < config.http_port < 65536:
            problems.append(f"http_port out of range: {config.http_port}")

        return problems

    def to_dict(self, redact_secrets: bool = True) -> Dict[str, Any]:
        """Configuration as a dict, with the API key masked by default."""
        config_dict = asdict(self.get_config())
        if redact_secrets and config_dict.get("provider_api_key"):
            config_dict["provider_api_key"] = "***"
        return config_dict
