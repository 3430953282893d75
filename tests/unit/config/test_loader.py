"""Tests for configuration loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError
import pytest

from actionhub.core.atlas.models import AtlasPackOptions
from actionhub.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
    load_export_config,
    load_naming_manifest,
)
from actionhub.core.config.models import FPS_PRESETS, RESOLUTION_PRESETS, AppConfig, LoggingConfig
from actionhub.core.export.models import AssetStatusPolicy, OutputFormat, SpritePackaging
from actionhub.core.naming.models import DirectionSet, ViewId


class TestDetectFormat:
    """Test suite for detect_format."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("a.json", "json"), ("a.yaml", "yaml"), ("a.YML", "yaml")],
    )
    def test_known(self, name: str, expected: str) -> None:
        assert detect_format(name) == expected

    def test_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unsupported config format"):
            detect_format("a.toml")


class TestLoadConfig:
    """Test suite for load_config."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_empty_yaml_is_empty_dict(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("a: [1, 2")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{nope")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(path)

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)


def test_load_export_config_yaml(tmp_path: Path) -> None:
    """A YAML export config validates into ExportConfig."""
    path = tmp_path / "export.yaml"
    path.write_text(
        "format: webm-vp9\n"
        "fps: 24\n"
        "sprite_packaging: atlas\n"
        "asset_status_policy: strict\n"
        "atlas:\n"
        "  max_size: 99999\n"
        "naming:\n"
        "  enabled: true\n"
        "  view: VIEW_TOP\n"
    )
    config = load_export_config(path)

    assert config.format is OutputFormat.WEBM_VP9
    assert config.fps == 24
    assert config.sprite_packaging is SpritePackaging.ATLAS
    assert config.asset_status_policy is AssetStatusPolicy.STRICT
    assert config.atlas.max_size == 8192
    assert config.naming.view is ViewId.TOP


def test_load_export_config_from_app_section(tmp_path: Path) -> None:
    """An app config's export section is accepted too."""
    path = tmp_path / "app.json"
    path.write_text(json.dumps({"export": {"width": 720, "height": 1280}}))
    config = load_export_config(path)
    assert (config.width, config.height) == (720, 1280)


def test_export_config_rejects_unknown_keys(tmp_path: Path) -> None:
    """Typos in export configs are errors."""
    path = tmp_path / "export.json"
    path.write_text(json.dumps({"fsp": 30}))
    with pytest.raises(ValidationError):
        load_export_config(path)


def test_load_app_config_defaults_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """No config file means defaults."""
    monkeypatch.chdir(tmp_path)
    config = load_app_config()
    assert config == AppConfig()
    assert config.logging.level == "INFO"


def test_load_app_config_file(tmp_path: Path) -> None:
    """App config carries logging and export sections."""
    path = tmp_path / "app.yaml"
    path.write_text("logging:\n  level: DEBUG\n  format: json\nexport:\n  fps: 60\n")
    config = load_app_config(path)
    assert config.logging == LoggingConfig(level="DEBUG", format="json")
    assert config.export.fps == 60


def test_logging_level_validated() -> None:
    """Unknown levels are rejected."""
    with pytest.raises(ValidationError):
        LoggingConfig(level="LOUD")


def test_load_naming_manifest(tmp_path: Path) -> None:
    """Manifest files accept the short dir/type keys."""
    path = tmp_path / "manifest.json"
    path.write_text(
        json.dumps(
            {
                "version": "1.0",
                "defaults": {"dir": "8dir"},
                "mappings": {"hero::run": {"name": "locomotion/run_01", "type": "once"}},
            }
        )
    )
    manifest = load_naming_manifest(path)
    assert manifest.defaults is not None
    assert manifest.defaults.direction is DirectionSet.EIGHT
    assert manifest.mappings["hero::run"].name == "locomotion/run_01"


def test_load_naming_manifest_invalid(tmp_path: Path) -> None:
    """Bad enum values surface as ValueError."""
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps({"mappings": {"x": {"dir": "sideways"}}}))
    with pytest.raises(ValueError, match="Invalid naming manifest"):
        load_naming_manifest(path)


def test_configure_logging_from_app_config(tmp_path: Path) -> None:
    """Logging config drives level and file output."""
    log_file = tmp_path / "export.log"
    configure_logging(AppConfig(logging=LoggingConfig(level="WARNING", file=str(log_file))))

    logging.getLogger("actionhub.test").warning("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert logging.getLogger().level == logging.WARNING
    assert "hello from test" in log_file.read_text()


def test_presets() -> None:
    """Resolution and fps presets are available."""
    assert RESOLUTION_PRESETS["portrait-1080"].height == 1920
    assert 30 in FPS_PRESETS
    assert AtlasPackOptions().max_size == 2048
