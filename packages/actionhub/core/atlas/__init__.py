"""Sprite atlas packer.

Bin-packs rendered frame sequences into texture pages with a greedy shelf
heuristic and emits a texture-packer compatible frame index per page.
"""

from actionhub.core.atlas.encode import data_uri_to_bytes, encode_png
from actionhub.core.atlas.errors import AtlasError, EncodeExhaustedError, PackingOverflowError
from actionhub.core.atlas.models import (
    AtlasPackOptions,
    AtlasPage,
    PackedPage,
    PlacedFrame,
    Rect,
    TrimmedFrame,
)
from actionhub.core.atlas.packer import frame_key, pack_frames_to_atlas, pack_shelf, render_page
from actionhub.core.atlas.trim import build_trimmed_frames, compute_trim_rect, load_frame

__all__ = [
    "AtlasError",
    "AtlasPackOptions",
    "AtlasPage",
    "EncodeExhaustedError",
    "PackedPage",
    "PackingOverflowError",
    "PlacedFrame",
    "Rect",
    "TrimmedFrame",
    "build_trimmed_frames",
    "compute_trim_rect",
    "data_uri_to_bytes",
    "encode_png",
    "frame_key",
    "load_frame",
    "pack_frames_to_atlas",
    "pack_shelf",
    "render_page",
]
