"""Configuration management for ActionHub."""

from actionhub.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
    load_export_config,
    load_naming_manifest,
)
from actionhub.core.config.models import (
    FPS_PRESETS,
    RESOLUTION_PRESETS,
    AppConfig,
    LoggingConfig,
    ResolutionPreset,
)

__all__ = [
    # Loaders
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
    "load_export_config",
    "load_naming_manifest",
    # Models
    "FPS_PRESETS",
    "RESOLUTION_PRESETS",
    "AppConfig",
    "LoggingConfig",
    "ResolutionPreset",
]
