"""Configuration management for Job Prompter Admin.

Loads configuration from environment variables and optional YAML file.
Environment variables use the JOBPROMPTER_ prefix.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml


DEFAULT_BACKEND_URL = "http://localhost:5000/api"


def _parse_delays(raw: Optional[str], default: List[float]) -> List[float]:
    """Parse a comma separated list of seconds, e.g. "2,5,10"."""
    if not raw:
        return list(default)
    return [float(part) for part in raw.split(",") if part.strip()]


@dataclass
class BackendConfig:
    """Job-import backend connection settings."""

    base_url: str = DEFAULT_BACKEND_URL
    timeout_sec: float = 10.0

    @classmethod
    def from_env(cls) -> "BackendConfig":
        """Load backend configuration from environment variables."""
        return cls(
            base_url=os.environ.get("JOBPROMPTER_BACKEND_URL", DEFAULT_BACKEND_URL),
            timeout_sec=float(os.environ.get("JOBPROMPTER_BACKEND_TIMEOUT", "10")),
        )


@dataclass
class CacheConfig:
    """Local cache (persisted dashboard state) configuration."""

    store_file: Path = field(default_factory=lambda: Path("data/local_cache.json"))
    max_records: int = 10

    # Optimistic stats are trusted for this long after a manual import
    stats_max_age_sec: float = 30.0

    # Delayed refreshes after a manual import
    recheck_delays_sec: List[float] = field(default_factory=lambda: [2.0, 5.0, 10.0])

    @classmethod
    def from_env(cls) -> "CacheConfig":
        """Load cache configuration from environment variables."""
        data_path = Path(os.environ.get("JOBPROMPTER_DATA_DIR", "data"))

        return cls(
            store_file=data_path / "local_cache.json",
            max_records=int(os.environ.get("JOBPROMPTER_MAX_CACHED_LOGS", "10")),
            stats_max_age_sec=float(
                os.environ.get("JOBPROMPTER_STATS_MAX_AGE", "30")
            ),
            recheck_delays_sec=_parse_delays(
                os.environ.get("JOBPROMPTER_RECHECK_DELAYS"), [2.0, 5.0, 10.0]
            ),
        )


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Load API configuration from environment variables."""
        return cls(
            host=os.environ.get("JOBPROMPTER_HOST", "0.0.0.0"),
            port=int(os.environ.get("JOBPROMPTER_PORT", "3000")),
            debug=os.environ.get("JOBPROMPTER_DEBUG", "false").lower() == "true",
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"
    file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Load logging configuration from environment variables."""
        return cls(
            level=os.environ.get("JOBPROMPTER_LOG_LEVEL", "INFO"),
            format=os.environ.get("JOBPROMPTER_LOG_FORMAT", "json"),
            file=os.environ.get("JOBPROMPTER_LOG_FILE"),
        )


@dataclass
class Config:
    """Main configuration container."""

    api: APIConfig
    backend: BackendConfig
    cache: CacheConfig
    logging: LoggingConfig

    # Runtime settings
    environment: str = "development"

    @classmethod
    def from_env(cls) -> "Config":
        """Load all configuration from environment variables."""
        return cls(
            api=APIConfig.from_env(),
            backend=BackendConfig.from_env(),
            cache=CacheConfig.from_env(),
            logging=LoggingConfig.from_env(),
            environment=os.environ.get("JOBPROMPTER_ENV", "development"),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load configuration from YAML file on top of the env-based config."""
        config_path = Path(path)

        if config_path.exists():
            with open(config_path, "r") as f:
                yaml_config = yaml.safe_load(f) or {}
        else:
            yaml_config = {}

        config = cls.from_env()

        if "api" in yaml_config:
            config.api.host = yaml_config["api"].get("host", config.api.host)
            config.api.port = yaml_config["api"].get("port", config.api.port)
            config.api.debug = yaml_config["api"].get("debug", config.api.debug)

        if "backend" in yaml_config:
            config.backend.base_url = yaml_config["backend"].get(
                "base_url", config.backend.base_url
            )
            config.backend.timeout_sec = yaml_config["backend"].get(
                "timeout_sec", config.backend.timeout_sec
            )

        if "cache" in yaml_config:
            cache = yaml_config["cache"]
            if "store_file" in cache:
                config.cache.store_file = Path(cache["store_file"])
            config.cache.max_records = cache.get(
                "max_records", config.cache.max_records
            )
            config.cache.stats_max_age_sec = cache.get(
                "stats_max_age_sec", config.cache.stats_max_age_sec
            )
            config.cache.recheck_delays_sec = cache.get(
                "recheck_delays_sec", config.cache.recheck_delays_sec
            )

        if "logging" in yaml_config:
            config.logging.level = yaml_config["logging"].get(
                "level", config.logging.level
            )

        return config

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.backend.base_url.startswith(("http://", "https://")):
            errors.append("JOBPROMPTER_BACKEND_URL must be an http(s) URL")

        if self.cache.max_records < 1:
            errors.append("max_records must be at least 1")

        if self.cache.stats_max_age_sec < 0:
            errors.append("stats_max_age_sec must not be negative")

        if any(delay < 0 for delay in self.cache.recheck_delays_sec):
            errors.append("recheck delays must not be negative")

        return errors
