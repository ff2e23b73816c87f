"""Service configuration.

Loads from config.yaml if present, with environment variable overrides.
Environment variables use the pattern: HAZARD_<SECTION>_<KEY> (uppercase).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

import yaml


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    env: str = "dev"  # "dev" or "prod"


@dataclass
class StorageConfig:
    base_dir: str = "data"  # holds reports.jsonl and zones.jsonl


@dataclass
class PredictionConfig:
    days_to_analyze: int = 30
    prediction_hours: int = 24
    cluster_radius_km: float = 0.5
    query_radius_km: float = 1.0
    min_crowding_level: int = 20
    timezone: str = "UTC"  # used for hour-of-day / day-of-week buckets

    @property
    def tz(self) -> tzinfo:
        if self.timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.timezone)


@dataclass
class LoggingConfig:
    level: str = "info"
    format: str = "console"  # "console" or "json"
    file: str = ""


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    prediction: PredictionConfig = field(default_factory=PredictionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _apply_env_overrides(config: AppConfig) -> None:
    """Override config values from environment variables."""
    mapping = {
        "HAZARD_SERVER_HOST": lambda v: setattr(config.server, "host", v),
        "HAZARD_SERVER_PORT": lambda v: setattr(config.server, "port", int(v)),
        "HAZARD_SERVER_ENV": lambda v: setattr(config.server, "env", v),
        "HAZARD_STORAGE_BASE_DIR": lambda v: setattr(config.storage, "base_dir", v),
        "HAZARD_PREDICTION_DAYS": lambda v: setattr(config.prediction, "days_to_analyze", int(v)),
        "HAZARD_PREDICTION_HOURS": lambda v: setattr(config.prediction, "prediction_hours", int(v)),
        "HAZARD_PREDICTION_CLUSTER_RADIUS_KM": lambda v: setattr(config.prediction, "cluster_radius_km", float(v)),
        "HAZARD_PREDICTION_QUERY_RADIUS_KM": lambda v: setattr(config.prediction, "query_radius_km", float(v)),
        "HAZARD_PREDICTION_MIN_LEVEL": lambda v: setattr(config.prediction, "min_crowding_level", int(v)),
        "HAZARD_PREDICTION_TIMEZONE": lambda v: setattr(config.prediction, "timezone", v),
        "HAZARD_LOG_LEVEL": lambda v: setattr(config.logging, "level", v),
        "HAZARD_LOG_FORMAT": lambda v: setattr(config.logging, "format", v),
        "HAZARD_LOG_FILE": lambda v: setattr(config.logging, "file", v),
    }
    for env_key, setter in mapping.items():
        val = os.environ.get(env_key)
        if val is not None:
            setter(val)


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from YAML file + environment overrides."""
    config = AppConfig()

    # Try to load YAML
    if config_path is None:
        config_path = Path("config.yaml")
    else:
        config_path = Path(config_path)

    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        for section in ("server", "storage", "prediction", "logging"):
            target = getattr(config, section)
            for k, v in (raw.get(section) or {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)

    # Environment overrides always win
    _apply_env_overrides(config)
    return config
