"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
import yaml

from actionhub.core.config.models import AppConfig
from actionhub.core.export.models import ExportConfig
from actionhub.core.naming.models import NamingManifest
from actionhub.core.utils.json import read_json
from actionhub.core.utils.logging import configure_logging as _configure_root_logging

logger = logging.getLogger(__name__)


_FORMATS_BY_SUFFIX = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def detect_format(file_path: Path | str) -> str:
    """Return "json" or "yaml" for a config, manifest or export file.

    Raises:
        ValueError: For any other extension

    Example:
        >>> detect_format("export.json")
        'json'
        >>> detect_format("actionhub.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()
    try:
        return _FORMATS_BY_SUFFIX[suffix]
    except KeyError:
        raise ValueError(f"Unsupported config format: {suffix or '<none>'}") from None


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return a raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            return read_json(path)
        except Exception as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        with path.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    # safe_load returns None for empty files
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Expected a mapping at the top of {path}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing file at the default location yields all defaults.

    Raises:
        ValidationError: If config is invalid
    """
    if path is None:
        path = AppConfig.default_path()
        if not Path(path).exists():
            return AppConfig()

    return AppConfig.model_validate(load_config(path))


def load_export_config(path: str | Path) -> ExportConfig:
    """Load an export configuration.

    Accepts either a bare export document or an app config with an
    ``export`` section.

    Raises:
        ValidationError: If config is invalid
    """
    raw = load_config(path)
    if "export" in raw and isinstance(raw["export"], dict):
        raw = raw["export"]
    return ExportConfig.model_validate(raw)


def load_naming_manifest(path: str | Path) -> NamingManifest:
    """Load an action naming manifest.

    Raises:
        ValueError: If the file is unreadable or does not validate
    """
    raw = load_config(path)
    try:
        manifest = NamingManifest.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid naming manifest {path}: {e}") from e
    logger.debug(f"Loaded naming manifest {path} with {len(manifest.mappings)} mapping(s)")
    return manifest


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure Python logging from app config.

    Args:
        config: AppConfig instance (loads default if None)
    """
    if config is None:
        config = load_app_config()

    _configure_root_logging(
        level=config.logging.level,
        filename=config.logging.file,
        structured=config.logging.format == "json",
    )
