"""Atlas packing models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator

from actionhub.core.utils.math import clamp, finite_or

MIN_PAGE_SIZE = 256
MAX_PAGE_SIZE = 8192
MAX_PADDING = 64
DEFAULT_PAGE_SIZE = 2048
DEFAULT_PADDING = 2


class AtlasPackOptions(BaseModel):
    """Atlas packing options.

    Out-of-range or non-numeric values are clamped rather than rejected:
    ``max_size`` to [256, 8192], ``padding`` to [0, 64].
    """

    max_size: int = Field(default=DEFAULT_PAGE_SIZE, description="Page edge limit (px)")
    padding: int = Field(default=DEFAULT_PADDING, description="Gap around every frame (px)")
    trim: bool = Field(default=True, description="Trim frames to their opaque bounds")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("max_size", mode="before")
    @classmethod
    def _clamp_max_size(cls, value: Any) -> int:
        return int(clamp(finite_or(value, DEFAULT_PAGE_SIZE), MIN_PAGE_SIZE, MAX_PAGE_SIZE))

    @field_validator("padding", mode="before")
    @classmethod
    def _clamp_padding(cls, value: Any) -> int:
        return int(clamp(finite_or(value, DEFAULT_PADDING), 0, MAX_PADDING))


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class TrimmedFrame:
    """A decoded frame and the sub-rectangle that will be packed.

    Attributes:
        index: Position of the frame in the input sequence
        image: Decoded RGBA frame
        source: Trim rectangle within the full frame
        full_width: Full frame width
        full_height: Full frame height
    """

    index: int
    image: Image.Image = field(repr=False)
    source: Rect
    full_width: int
    full_height: int


@dataclass(frozen=True)
class PlacedFrame:
    frame: TrimmedFrame
    x: int
    y: int

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.frame.source.w, self.frame.source.h)


@dataclass(frozen=True)
class PackedPage:
    """Placement result for one page, before rendering."""

    placed: list[PlacedFrame]
    width: int
    height: int


@dataclass(frozen=True)
class AtlasPage:
    """Rendered page: PNG bytes plus its texture-packer style frame index."""

    image_bytes: bytes = field(repr=False)
    document: dict[str, Any]
    image_file_name: str
    json_file_name: str
