"""Configuration loading from YAML and environment.

Every section can be overridden with env variables using its prefix
(STORAGE_DATA_DIR, REPORT_ID_PREFIX, LOGGING_LEVEL, ...). A missing
config file yields defaults.
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Common browser localStorage quota
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024

# Injected by load_config for ${VAR} substitution
_current_env: dict[str, str] = {}


class StorageConfig(BaseSettings):
    """Key-value storage backend and key names."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_", extra="ignore")

    backend: Literal["file", "memory"] = Field(default="file", description="file or memory")
    data_dir: Path = Field(default=Path(".reportdesk"), description="Directory for the file backend")
    reports_key: str = Field(default="reports", min_length=1, description="Key holding the report collection")
    pointer_key: str = Field(default="lastReportId", min_length=1, description="Key holding the last-created id")
    quota_bytes: int = Field(
        default=DEFAULT_QUOTA_BYTES,
        ge=0,
        description="Total bytes the backend may hold; 0 disables the quota",
    )


class ReportIdConfig(BaseSettings):
    """Report identifier format: prefix + number in [min_value, max_value]."""

    model_config = SettingsConfigDict(env_prefix="REPORT_ID_", extra="ignore")

    prefix: str = Field(default="RPT", description="Identifier prefix")
    min_value: int = Field(default=1000, ge=0, description="Smallest numeric part (inclusive)")
    max_value: int = Field(default=9999, ge=0, description="Largest numeric part (inclusive)")
    max_attempts: int = Field(default=100, ge=1, description="Random draws before picking from free ids")

    @model_validator(mode="after")
    def _check_range(self) -> "ReportIdConfig":
        if self.max_value < self.min_value:
            raise ValueError("report_id.max_value must be >= report_id.min_value")
        return self

    @property
    def space_size(self) -> int:
        """Number of distinct identifiers the range allows."""
        return self.max_value - self.min_value + 1


class TrackingConfig(BaseSettings):
    """Simulated pickup tracker."""

    model_config = SettingsConfigDict(env_prefix="TRACKING_", extra="ignore")

    interval_seconds: float = Field(default=1.6, ge=0, description="Delay between tracking steps")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    storage_level: str = Field(
        default="WARNING",
        description="Threshold for reportdesk.services.store loggers (never quieter than level)",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    storage: StorageConfig = Field(default_factory=StorageConfig)
    report_id: ReportIdConfig = Field(default_factory=ReportIdConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _section(raw: dict[str, Any], name: str, prefix: str) -> dict[str, Any]:
    """YAML section with env overrides (PREFIX_FIELD) taking precedence."""
    section = dict(raw.get(name) or {})
    for key, value in _current_env.items():
        if key.startswith(prefix):
            section.pop(key[len(prefix):].lower(), None)
    return section


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment."""
    global _current_env

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    if not path.is_file():
        return AppConfig()

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    raw = _substitute_env(raw)

    storage = StorageConfig(**_section(raw, "storage", "STORAGE_"))
    report_id = ReportIdConfig(**_section(raw, "report_id", "REPORT_ID_"))
    tracking = TrackingConfig(**_section(raw, "tracking", "TRACKING_"))
    logging = LoggingConfig(**_section(raw, "logging", "LOGGING_"))

    return AppConfig(
        storage=storage,
        report_id=report_id,
        tracking=tracking,
        logging=logging,
    )
