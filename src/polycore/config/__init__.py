"""Configuration management for polycore.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Comparison tolerance for geometric predicates
- LoggingConfig: Logging settings
- PolycoreSettings: Main application settings
"""

from polycore.config.settings import (
    GeometryConfig,
    LoggingConfig,
    PolycoreSettings,
    get_default_settings,
)

__all__ = [
    "GeometryConfig",
    "LoggingConfig",
    "PolycoreSettings",
    "get_default_settings",
]
