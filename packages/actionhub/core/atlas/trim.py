"""Frame decoding and alpha trimming."""

from __future__ import annotations

from collections.abc import Sequence
from io import BytesIO

import numpy as np
from PIL import Image

from actionhub.core.atlas.models import Rect, TrimmedFrame

FrameSource = bytes | Image.Image


def load_frame(frame: FrameSource) -> Image.Image:
    """Decode a frame to an RGBA image."""
    if isinstance(frame, Image.Image):
        image = frame
    else:
        image = Image.open(BytesIO(frame))
        image.load()
    return image if image.mode == "RGBA" else image.convert("RGBA")


def compute_trim_rect(image: Image.Image) -> Rect:
    """Tight bounding box of pixels with non-zero alpha.

    A fully transparent frame yields a 1x1 box at the origin so it still
    occupies a slot in the atlas.
    """
    alpha = np.asarray(image.getchannel("A"))
    rows = np.flatnonzero(alpha.any(axis=1))
    if rows.size == 0:
        return Rect(0, 0, 1, 1)
    cols = np.flatnonzero(alpha.any(axis=0))
    top, bottom = int(rows[0]), int(rows[-1])
    left, right = int(cols[0]), int(cols[-1])
    return Rect(left, top, right - left + 1, bottom - top + 1)


def build_trimmed_frames(frames: Sequence[FrameSource], trim: bool) -> list[TrimmedFrame]:
    """Decode frames and compute their packing rectangles, keeping input order."""
    trimmed: list[TrimmedFrame] = []
    for index, frame in enumerate(frames):
        image = load_frame(frame)
        width, height = image.size
        rect = compute_trim_rect(image) if trim else Rect(0, 0, width, height)
        trimmed.append(
            TrimmedFrame(
                index=index,
                image=image,
                source=rect,
                full_width=width,
                full_height=height,
            )
        )
    return trimmed
