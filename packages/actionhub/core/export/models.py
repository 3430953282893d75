"""Export models: assets, batch configuration, render tasks and results."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from actionhub.core.atlas.models import AtlasPackOptions
from actionhub.core.naming.models import NamingConfig


class AssetStatus(str, Enum):
    """Per-asset export status.

    Transitions only ``idle -> waiting -> exporting -> completed|failed``.
    """

    IDLE = "idle"
    WAITING = "waiting"
    EXPORTING = "exporting"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_final(self) -> bool:
        return self in (AssetStatus.COMPLETED, AssetStatus.FAILED)


class OutputFormat(str, Enum):
    WEBM_VP9 = "webm-vp9"
    WEBM_VP8 = "webm-vp8"
    MP4 = "mp4"
    MP4_H264 = "mp4-h264"
    PNG_SEQUENCE = "png-sequence"
    JPG_SEQUENCE = "jpg-sequence"

    @property
    def is_sequence(self) -> bool:
        return self in (OutputFormat.PNG_SEQUENCE, OutputFormat.JPG_SEQUENCE)

    @property
    def extension(self) -> str:
        """File extension of the deliverable (video container or frame image)."""
        if self is OutputFormat.PNG_SEQUENCE:
            return "png"
        if self is OutputFormat.JPG_SEQUENCE:
            return "jpg"
        if self in (OutputFormat.WEBM_VP9, OutputFormat.WEBM_VP8):
            return "webm"
        return "mp4"


class SpritePackaging(str, Enum):
    """How frame-sequence output is packaged."""

    SEQUENCE = "sequence"
    ATLAS = "atlas"


class AssetStatusPolicy(str, Enum):
    """How render failures affect asset-level status.

    BEST_EFFORT keeps the legacy behaviour: a failed animation is recorded
    as a partial failure and the asset still ends ``completed``. STRICT
    marks the asset ``failed`` on its first failed animation.
    """

    BEST_EFFORT = "best_effort"
    STRICT = "strict"


class ExportConfig(BaseModel):
    """Settings for one batch run. Immutable for the duration of the run."""

    width: int = Field(default=1080, gt=0, description="Output width (px)")
    height: int = Field(default=1080, gt=0, description="Output height (px)")
    fps: int = Field(default=30, gt=0, le=240, description="Frames per second")
    duration: float = Field(default=5.0, gt=0, description="Clip duration (seconds)")
    scale: float = Field(default=1.0, ge=0.1, le=3.0, description="Skeleton scale")
    background_color: str = Field(default="transparent", description="Hex color or 'transparent'")
    format: OutputFormat = Field(default=OutputFormat.PNG_SEQUENCE)
    sprite_packaging: SpritePackaging = Field(default=SpritePackaging.SEQUENCE)
    atlas: AtlasPackOptions = Field(default_factory=AtlasPackOptions)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    asset_status_policy: AssetStatusPolicy = Field(default=AssetStatusPolicy.BEST_EFFORT)
    max_concurrent_tasks: int | None = Field(
        default=None,
        gt=0,
        description="Executor-side task bound (None defers to the render engine)",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def uses_atlas(self) -> bool:
        return self.format.is_sequence and self.sprite_packaging is SpritePackaging.ATLAS


@dataclass
class AnimationAsset:
    """A selected skeletal-animation asset.

    Owned by the caller; the export core reads identity and animation
    fields and writes ``status``.

    Attributes:
        id: Stable asset id used in status callbacks
        name: Display name
        asset_key: Base path used as the manifest lookup prefix
        animation_names: Filled in by the scan phase
        status: Current export status
        source: Optional on-disk location for engines that read files
    """

    id: str
    name: str
    asset_key: str = ""
    animation_names: list[str] = field(default_factory=list)
    status: AssetStatus = AssetStatus.IDLE
    source: Path | None = None


@dataclass(frozen=True)
class RenderTask:
    """One animation of one asset, with its render parameters."""

    asset: AnimationAsset
    animation: str
    width: int
    height: int
    fps: int
    duration: float
    scale: float
    background_color: str
    format: OutputFormat
    cancel_token: asyncio.Event = field(repr=False, compare=False)

    @property
    def label(self) -> str:
        return f"{self.asset.name} - {self.animation}"

    def is_cancelled(self) -> bool:
        return self.cancel_token.is_set()

    @classmethod
    def from_config(
        cls,
        asset: AnimationAsset,
        animation: str,
        config: ExportConfig,
        cancel_token: asyncio.Event,
    ) -> RenderTask:
        return cls(
            asset=asset,
            animation=animation,
            width=config.width,
            height=config.height,
            fps=config.fps,
            duration=config.duration,
            scale=config.scale,
            background_color=config.background_color,
            format=config.format,
            cancel_token=cancel_token,
        )


@dataclass(frozen=True)
class VideoOutput:
    """A single encoded video artifact."""

    data: bytes = field(repr=False)
    ext: str = "mp4"


@dataclass(frozen=True)
class FramesOutput:
    """Per-frame encoded images in playback order."""

    frames: list[bytes] = field(repr=False)
    image_ext: str = "png"


RenderOutput = VideoOutput | FramesOutput


@dataclass(frozen=True)
class RenderResult:
    """What the render engine produced for one task. Never mutated."""

    total_frames: int
    output: RenderOutput
