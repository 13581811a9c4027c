"""
Settings loading for the WOD scraper.

Values come from three layers, later layers winning:

1. Model defaults (settings.py)
2. A YAML file
3. Environment variables named WOD_SCRAPER__{SECTION}__{KEY},
   e.g. WOD_SCRAPER__PROGRAMMING__TEAM_ID=team_abc
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from wod_scraper.config.settings import Settings
from wod_scraper.core.exceptions import ConfigurationError

ENV_PREFIX = "WOD_SCRAPER"

_TRUE_VALUES = {"true", "yes", "on"}
_FALSE_VALUES = {"false", "no", "off"}
_NONE_VALUES = {"none", "null", ""}

_settings_instance: Settings | None = None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge `override` into a copy of `base`, recursing into sections."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _parse_env_value(value: str) -> Any:
    """
    Interpret an environment string.

    Booleans and nulls are matched case-insensitively, then int and
    float are tried; anything else stays a string. "0" and "1" are
    numbers, not booleans.
    """
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    if lowered in _NONE_VALUES:
        return None

    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            continue
    return value


def _load_env_overrides(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Collect {section: {key: value}} from prefixed environment variables."""
    marker = f"{prefix}__"
    overrides: dict[str, Any] = {}

    for name, raw in os.environ.items():
        if not name.startswith(marker):
            continue

        path = name[len(marker):].lower().split("__")
        if len(path) < 2 or not all(path):
            continue

        target = overrides
        for part in path[:-1]:
            target = target.setdefault(part, {})
        target[path[-1]] = _parse_env_value(raw)

    return overrides


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Read a YAML mapping.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Configuration file is not valid YAML: {e}",
            details={"path": str(path)},
        ) from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got: {type(content).__name__}",
            details={"path": str(path)},
        )
    return content


def load_config(
    config_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """
    Build validated settings from defaults, a YAML file and the environment.

    Args:
        config_path: YAML file; None means defaults plus environment
        env_prefix: Prefix of override variables

    Returns:
        Validated Settings

    Raises:
        FileNotFoundError: If config_path is given but missing
        ConfigurationError: If the file or the merged values are invalid
    """
    data: dict[str, Any] = {}
    if config_path is not None:
        data = _load_yaml_file(Path(config_path))

    data = _deep_merge(data, _load_env_overrides(env_prefix))

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} error(s)",
            details={"errors": [".".join(str(p) for p in err["loc"]) for err in e.errors()]},
        ) from e


def get_settings(
    config_path: Path | str | None = None,
    reload: bool = False,
) -> Settings:
    """Process-wide settings, loaded on first use or when `reload` is set."""
    global _settings_instance

    if _settings_instance is None or reload:
        _settings_instance = load_config(config_path)
    return _settings_instance


def reset_settings() -> None:
    """Forget the cached settings."""
    global _settings_instance
    _settings_instance = None


def get_default_config_path() -> Path | None:
    """
    First existing config file among ./config.yaml, ./config/config.yaml
    and ~/.wod_scraper/config.yaml.
    """
    candidates = (
        Path.cwd() / "config.yaml",
        Path.cwd() / "config" / "config.yaml",
        Path.home() / ".wod_scraper" / "config.yaml",
    )
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None
