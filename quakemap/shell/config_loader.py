"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, DataSourceConfig, AlertConfig) are defined in
quakemap/core/config.py to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from quakemap.core.config import (
    AlertConfig,
    Config,
    DataSourceConfig,
    validate_config,
)
from quakemap.core.location import DEFAULT_VIEW, USER_LOCATION_ZOOM, ViewState
from quakemap.core.source import DataSourceMode


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"

# Environment variables overriding file values
ENV_OVERRIDES = {
    "QUAKEMAP_LIVE_URL": ("data_sources", "live_url"),
    "QUAKEMAP_STORED_URL": ("data_sources", "stored_url"),
    "QUAKEMAP_TIMEOUT": ("data_sources", "timeout_seconds"),
    "QUAKEMAP_GEOLOCATION_URL": (None, "geolocation_url"),
}


class ConfigError(Exception):
    """Raised when configuration is invalid."""


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} placeholder from the environment.

    Args:
        value: Value to resolve

    Returns:
        Resolved value, or the original if not a placeholder or not set
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_data_sources(data: dict[str, Any]) -> DataSourceConfig:
    """Parse the data_sources section."""
    defaults = DataSourceConfig()
    return DataSourceConfig(
        live_url=_resolve_value(data.get("live_url", defaults.live_url)),
        stored_url=_resolve_value(data.get("stored_url", defaults.stored_url)),
        timeout_seconds=float(
            _resolve_value(data.get("timeout_seconds", defaults.timeout_seconds))
        ),
    )


def _parse_view(data: dict[str, Any]) -> ViewState:
    """Parse a viewport section."""
    return ViewState(
        latitude=float(data.get("latitude", DEFAULT_VIEW.latitude)),
        longitude=float(data.get("longitude", DEFAULT_VIEW.longitude)),
        zoom=int(data.get("zoom", DEFAULT_VIEW.zoom)),
    )


def _parse_alert(data: dict[str, Any]) -> AlertConfig:
    """Parse the alert section."""
    defaults = AlertConfig()
    return AlertConfig(
        duration_ms=int(data.get("duration_ms", defaults.duration_ms)),
        css_class=str(data.get("css_class", defaults.css_class)),
    )


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of data with QUAKEMAP_* environment overrides applied."""
    merged = dict(data)
    merged["data_sources"] = dict(data.get("data_sources") or {})

    for env_name, (section, key) in ENV_OVERRIDES.items():
        env_value = os.environ.get(env_name)
        if env_value is None:
            continue
        if section is None:
            merged[key] = env_value
        else:
            merged[section][key] = env_value
        logger.info("Using %s from environment", env_name)

    return merged


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object

    Raises:
        ValueError: If a value has the wrong type or an unknown source name
    """
    data = _apply_env_overrides(data)
    defaults = Config()

    snapshot = data.get("snapshot") or {}

    return Config(
        data_sources=_parse_data_sources(data.get("data_sources") or {}),
        initial_source=DataSourceMode(
            str(data.get("initial_source", defaults.initial_source.value)).lower()
        ),
        initial_view=_parse_view(data.get("initial_view") or {}),
        user_location_zoom=int(data.get("user_location_zoom", USER_LOCATION_ZOOM)),
        alert=_parse_alert(data.get("alert") or {}),
        tile_url=_resolve_value(data.get("tile_url", defaults.tile_url)),
        tile_attribution=data.get("tile_attribution", defaults.tile_attribution),
        geolocation_url=_resolve_value(data.get("geolocation_url", defaults.geolocation_url)) or "",
        geolocation_timeout_seconds=float(
            data.get("geolocation_timeout_seconds", defaults.geolocation_timeout_seconds)
        ),
        snapshot_width=int(snapshot.get("width", defaults.snapshot_width)),
        snapshot_height=int(snapshot.get("height", defaults.snapshot_height)),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    data: Any = None
    if path.exists():
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        if data is None:
            logger.warning("Config file is empty, using defaults")
    else:
        logger.warning("Config file not found: %s, using defaults", path)

    config = load_config_from_dict(data or {})

    logger.info(
        "Loaded config: live=%s stored=%s initial=%s",
        config.data_sources.live_url,
        config.data_sources.stored_url,
        config.initial_source.value,
    )

    return config


def load_validated_config(config_path: str | Path | None = None) -> Config:
    """Load configuration and validate it.

    Warnings are logged; errors abort.

    Raises:
        ConfigError: If validation finds critical errors
    """
    config = load_config(config_path)
    result = validate_config(config)

    for warning in result.warnings:
        logger.warning("Config warning: %s: %s", warning.field, warning.message)

    if not result.valid:
        details = "; ".join(f"{e.field}: {e.message}" for e in result.critical_errors)
        raise ConfigError(f"Invalid configuration: {details}")

    return config
