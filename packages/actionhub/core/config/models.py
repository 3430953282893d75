"""Application configuration models."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from actionhub.core.export.models import ExportConfig


class ResolutionPreset(BaseModel):
    label: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    model_config = ConfigDict(frozen=True)


RESOLUTION_PRESETS: dict[str, ResolutionPreset] = {
    "square-720": ResolutionPreset(label="Square 720", width=720, height=720),
    "square-1080": ResolutionPreset(label="Square 1080", width=1080, height=1080),
    "portrait-720": ResolutionPreset(label="Portrait 720x1280", width=720, height=1280),
    "portrait-1080": ResolutionPreset(label="Portrait 1080x1920", width=1080, height=1920),
}

FPS_PRESETS: tuple[int, ...] = (24, 30, 60)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: Literal["text", "json"] = "text"
    file: str | None = Field(default=None, description="Optional log file path")


class AppConfig(BaseModel):
    """Application-level configuration (shared across all exports)."""

    model_config = ConfigDict(extra="ignore")

    output_dir: str = "exports"
    logging: LoggingConfig = LoggingConfig()
    export: ExportConfig = ExportConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("actionhub.yaml")
