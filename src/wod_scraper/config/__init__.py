"""
Configuration module for the WOD scraper.

Provides Pydantic-based settings management with YAML file support
and environment variable overrides.
"""

from wod_scraper.config.settings import (
    Settings,
    ScraperSettings,
    ExtractionSettings,
    APILLMSettings,
    StorageSettings,
    ProgrammingSettings,
    LoggingSettings,
)
from wod_scraper.config.loader import (
    load_config,
    get_settings,
    reset_settings,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "ScraperSettings",
    "ExtractionSettings",
    "APILLMSettings",
    "StorageSettings",
    "ProgrammingSettings",
    "LoggingSettings",
    "load_config",
    "get_settings",
    "reset_settings",
    "get_default_config_path",
]
