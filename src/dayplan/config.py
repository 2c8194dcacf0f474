"""YAML configuration for the day planner CLI."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import DayPlanError
from .models.gemini import DEFAULT_GEMINI_MODEL
from .prompts import DEFAULT_PREFERENCES

DEFAULT_CONFIG_NAME = "config.yaml"

DEFAULT_CONFIG_TEMPLATE: Dict[str, Any] = {
    "models": {
        "default": DEFAULT_GEMINI_MODEL,
        "api_key": "",
        "base_url": "",
        "timeout": 60,
        "max_output_tokens": 1000,
        "max_attempts": 3,
        "retry_delay": 0.5,
    },
    "planner": {
        "preferences": list(DEFAULT_PREFERENCES),
    },
    "paths": {
        "logs": "",
    },
    "logging": {
        "level": "INFO",
    },
}


class ConfigError(DayPlanError):
    """Raised when a configuration file cannot be read or has the wrong shape."""


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration template."""
    return copy.deepcopy(DEFAULT_CONFIG_TEMPLATE)


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Path]) -> Dict[str, Any]:
    """Load YAML configuration and merge it over the defaults.

    A missing ``config_path`` (``None``) yields the defaults unchanged.
    """
    config = default_config()
    if config_path is None:
        return config
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping at the top level.")
    return _merge(config, data)


def write_config(config_path: Path, config_data: Mapping[str, Any]) -> None:
    """Persist configuration data to disk with stable formatting."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(dict(config_data), handle, sort_keys=False)


def resolve_logs_root(config: Mapping[str, Any], *, base_dir: Path) -> Optional[Path]:
    """Return the exchange-log directory, or ``None`` when file logs are off."""
    paths_cfg = config.get("paths") or {}
    logs_value = paths_cfg.get("logs") if isinstance(paths_cfg, Mapping) else None
    if not isinstance(logs_value, str) or not logs_value.strip():
        return None
    candidate = Path(logs_value.strip())
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return candidate


def planner_preferences(config: Mapping[str, Any]) -> tuple[str, ...]:
    planner_cfg = config.get("planner") or {}
    raw = planner_cfg.get("preferences") if isinstance(planner_cfg, Mapping) else None
    if not isinstance(raw, list):
        return DEFAULT_PREFERENCES
    return tuple(str(item) for item in raw if str(item).strip())


def configure_logging(config: Mapping[str, Any]) -> None:
    """Configure root logging from the ``logging.level`` setting."""
    logging_cfg = config.get("logging") or {}
    level_name = str(logging_cfg.get("level", "INFO") if isinstance(logging_cfg, Mapping) else "INFO")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_CONFIG_TEMPLATE",
    "configure_logging",
    "default_config",
    "load_config",
    "planner_preferences",
    "resolve_logs_root",
    "write_config",
]
