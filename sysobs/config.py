"""
Configuration loading and validation for SysObs.

Every setting is resolved with the following precedence:
explicit override (command line) > configuration file > default.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from sysobs.core import SeverityType
from sysobs.logging_config import TRACE, get_logger
from sysobs.report import DEFAULT_SUBJECT

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = "sysobs.yaml"


class NotifierConfig(BaseModel):
    """Configuration for the notification destination."""
    model_config = ConfigDict(frozen=True)

    type: str = "console"  # "console", "email", "webhook", "pushover"
    config: dict[str, Any] = Field(default_factory=dict)  # Type-specific configuration


class Settings(BaseModel):
    """Resolved settings for one check pass."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    verbosity: int = Field(2, ge=0, le=4)
    environment: str = "default"

    # Log files
    log_folder: str = "."
    log_file: str = ""
    log_file_pattern: str = ""
    log_file_date_format: str = "%Y-%m-%d"
    log_file_date_delay: int = -1
    log_file_history_limit: int = Field(10, ge=0)
    log_file_history_offset: int = Field(0, ge=0)

    # Log types, most severe first, and their thresholds
    log_types: tuple[str, ...] = ("ERROR", "WARNING", "INFO", "DEBUG")
    log_type_pattern: str = "%type"
    log_thresholds_max: tuple[int, ...] = (1, 5, -1, -1)
    log_thresholds_var: tuple[int, ...] = (5, 10, -1, -1)
    log_notification_level: str = "WARNING"

    # Notification
    notification_subject: str = DEFAULT_SUBJECT
    notifier: NotifierConfig = Field(default_factory=NotifierConfig)

    disk_volume: str = "/"

    @field_validator("log_types", "log_thresholds_max", "log_thresholds_var", mode="before")
    @classmethod
    def _split_words(cls, value: Any) -> Any:
        """Accept space separated strings as well as lists."""
        if isinstance(value, str):
            return value.split()
        if isinstance(value, int):
            return [value]
        return value

    @model_validator(mode="after")
    def _check_thresholds(self) -> "Settings":
        if not self.log_types:
            raise ValueError("log_types must contain at least one log type")
        if len(set(self.log_types)) != len(self.log_types):
            raise ValueError(f"log_types contains duplicates: {' '.join(self.log_types)}")
        expected = len(self.log_types)
        for name in ("log_thresholds_max", "log_thresholds_var"):
            if len(getattr(self, name)) != expected:
                raise ValueError(
                    f"{name} must define {expected} value(s), one per log type"
                )
        return self

    @property
    def severities(self) -> tuple[SeverityType, ...]:
        """Severity types with their thresholds, most severe first."""
        return tuple(
            SeverityType(label=label, max_absolute=max_absolute, max_variation=max_variation)
            for label, max_absolute, max_variation in zip(
                self.log_types, self.log_thresholds_max, self.log_thresholds_var
            )
        )


def load_config_file(config_path: str | Path) -> dict[str, Any]:
    """
    Load raw settings from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Mapping of setting names to values

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file does not contain a mapping
        yaml.YAMLError: If YAML parsing fails
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with path.open('r', encoding='utf-8') as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ValueError(f"Configuration file must contain a mapping: {config_path}")
    return raw_config


def merge_notifier(base: Any, override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge notifier overrides into the notifier section of a configuration file.

    The file's notifier configuration is kept when the override selects the
    same notifier type (or none). Individual keys of the override win.
    """
    if not isinstance(base, Mapping):
        return dict(override)

    base_type = base.get("type", NotifierConfig().type)
    override_type = override.get("type", base_type)
    if override_type != base_type:
        return dict(override)

    base_config = base.get("config") or {}
    if not isinstance(base_config, Mapping):
        return {**base, **override}
    return {
        **base,
        **override,
        "config": {**base_config, **override.get("config", {})},
    }


def resolve_settings(
    overrides: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> Settings:
    """
    Resolve settings from overrides, a configuration file and defaults.

    Args:
        overrides: Explicit values, None values are ignored
        config_path: Configuration file. When None, ``sysobs.yaml`` in the
            working directory is used if it exists.

    Returns:
        Validated Settings

    Raises:
        FileNotFoundError: If an explicitly named config file doesn't exist
        ValueError: If the resolved settings are invalid
    """
    raw: dict[str, Any] = {}
    if config_path is not None:
        logger.info("Using configuration file: '%s'", config_path)
        raw = load_config_file(config_path)
    elif Path(DEFAULT_CONFIG_FILE).exists():
        logger.info("Using default configuration file: '%s'", DEFAULT_CONFIG_FILE)
        raw = load_config_file(DEFAULT_CONFIG_FILE)
    else:
        logger.info("No configuration file defined, using defaults")

    explicit = {key: value for key, value in (overrides or {}).items() if value is not None}
    for key in explicit:
        logger.log(TRACE, "Found configuration value for '%s' in command line arguments", key)

    merged = {**raw, **explicit}
    if "notifier" in explicit:
        merged["notifier"] = merge_notifier(raw.get("notifier"), explicit["notifier"])

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        raise ValueError(f"Configuration validation error: {e}") from e

    for key, value in settings.model_dump(exclude={"notifier"}).items():
        logger.log(TRACE, "   %s = '%s'", key, value)
    logger.log(TRACE, "   notifier = '%s'", settings.notifier.type)
    return settings
