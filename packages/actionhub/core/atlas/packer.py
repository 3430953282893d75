"""Shelf packing of frame sequences into atlas pages."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

from PIL import Image

from actionhub.core.atlas.encode import encode_png
from actionhub.core.atlas.errors import PackingOverflowError
from actionhub.core.atlas.models import (
    AtlasPackOptions,
    AtlasPage,
    PackedPage,
    PlacedFrame,
    TrimmedFrame,
)
from actionhub.core.atlas.trim import FrameSource, build_trimmed_frames
from actionhub.core.utils.logging import log_performance
from actionhub.core.utils.math import clamp, digits

logger = logging.getLogger(__name__)

ATLAS_APP = "ActionHub"
ATLAS_VERSION = "1.0"
ATLAS_FORMAT = "RGBA8888"


class _ShelfCursor:
    """Mutable shelf state for the page currently being filled."""

    def __init__(self, padding: int) -> None:
        self.padding = padding
        self.reset()

    def reset(self) -> None:
        self.placed: list[PlacedFrame] = []
        self.x = self.padding
        self.y = self.padding
        self.row_height = 0
        self.used_width = 0
        self.used_height = 0


def pack_shelf(frames: Sequence[TrimmedFrame], options: AtlasPackOptions) -> list[PackedPage]:
    """Place trimmed frames onto pages with a greedy shelf heuristic.

    Frames are sorted by trimmed height (descending, stable). Each frame is
    placed at the cursor; the cursor wraps to a new shelf when the page is
    too narrow and a new page is started when it is too short.

    Args:
        frames: Trimmed frames in input order
        options: Pack options (already clamped)

    Returns:
        Pages with frame placements and used extent

    Raises:
        PackingOverflowError: If a frame plus padding exceeds the page limit
    """
    max_size = options.max_size
    padding = options.padding
    pages: list[PackedPage] = []
    cursor = _ShelfCursor(padding)

    def flush_page() -> None:
        # used_width already ends with the gap after a shelf's last frame, so
        # the right margin is 2 * padding; the bottom margin is padding.
        if not cursor.placed:
            return
        pages.append(
            PackedPage(
                placed=cursor.placed,
                width=int(clamp(cursor.used_width + padding, 1, max_size)),
                height=int(clamp(cursor.used_height + padding, 1, max_size)),
            )
        )
        cursor.reset()

    for frame in sorted(frames, key=lambda f: -f.source.h):
        width, height = frame.source.w, frame.source.h
        if width + padding * 2 > max_size or height + padding * 2 > max_size:
            raise PackingOverflowError(
                frame_index=frame.index,
                width=width,
                height=height,
                max_size=max_size,
                padding=padding,
            )

        if cursor.x + width + padding > max_size:
            cursor.x = padding
            cursor.y += cursor.row_height + padding
            cursor.row_height = 0

        if cursor.y + height + padding > max_size:
            flush_page()

        cursor.placed.append(PlacedFrame(frame=frame, x=cursor.x, y=cursor.y))
        cursor.x += width + padding
        cursor.row_height = max(cursor.row_height, height)
        cursor.used_width = max(cursor.used_width, cursor.x)
        cursor.used_height = max(cursor.used_height, cursor.y + cursor.row_height)

    flush_page()
    return pages


def frame_key(base_name: str, index: int, pad: int) -> str:
    """Frame-index key for one source frame."""
    return f"{base_name}_{index:0{pad}d}.png"


def _frame_entry(placed: PlacedFrame, trimmed: bool) -> dict[str, Any]:
    source = placed.frame.source
    return {
        "frame": {"x": placed.x, "y": placed.y, "w": source.w, "h": source.h},
        "rotated": False,
        "trimmed": trimmed,
        "spriteSourceSize": {"x": source.x, "y": source.y, "w": source.w, "h": source.h},
        "sourceSize": {"w": placed.frame.full_width, "h": placed.frame.full_height},
    }


def render_page(page: PackedPage) -> Image.Image:
    """Composite every placed frame's trimmed region onto a page canvas.

    The canvas matches the page's used extent; it is not rounded up to a
    power of two.
    """
    canvas = Image.new("RGBA", (page.width, page.height), (0, 0, 0, 0))
    for placed in page.placed:
        source = placed.frame.source
        region = placed.frame.image.crop(
            (source.x, source.y, source.x + source.w, source.y + source.h)
        )
        canvas.paste(region, (placed.x, placed.y))
    return canvas


@log_performance
def pack_frames_to_atlas(
    frames: Sequence[FrameSource],
    base_name: str,
    options: AtlasPackOptions | None = None,
) -> list[AtlasPage]:
    """Pack a frame sequence into one or more atlas pages.

    Args:
        frames: Encoded frames (bytes) or PIL images, in playback order
        base_name: Base for frame keys and page file names
        options: Pack options (defaults: 2048px, 2px padding, trim on)

    Returns:
        Rendered pages; names carry a ``_p<index>`` suffix when there is
        more than one page

    Raises:
        PackingOverflowError: If a single frame cannot fit a page
        EncodeExhaustedError: If a page image cannot be encoded

    Example:
        >>> pages = pack_frames_to_atlas(frame_bytes, "run_01_LR_loop_30fps_24f")
        >>> pages[0].image_file_name
        'run_01_LR_loop_30fps_24f.png'
    """
    if not frames:
        return []

    options = options or AtlasPackOptions()
    trimmed = build_trimmed_frames(frames, options.trim)
    packed = pack_shelf(trimmed, options)
    pad = max(4, digits(len(frames) - 1))

    logger.debug(
        f"Packed {len(frames)} frames of '{base_name}' into {len(packed)} page(s) "
        f"(max={options.max_size}, padding={options.padding}, trim={options.trim})"
    )

    pages: list[AtlasPage] = []
    for page_index, page in enumerate(packed):
        suffix = f"_p{page_index}" if len(packed) > 1 else ""
        image_file_name = f"{base_name}{suffix}.png"
        json_file_name = f"{base_name}{suffix}.json"

        image_bytes = encode_png(render_page(page))
        document = {
            "frames": {
                frame_key(base_name, placed.frame.index, pad): _frame_entry(placed, options.trim)
                for placed in page.placed
            },
            "meta": {
                "app": ATLAS_APP,
                "version": ATLAS_VERSION,
                "image": image_file_name,
                "format": ATLAS_FORMAT,
                "size": {"w": page.width, "h": page.height},
                "scale": "1",
            },
        }
        pages.append(
            AtlasPage(
                image_bytes=image_bytes,
                document=document,
                image_file_name=image_file_name,
                json_file_name=json_file_name,
            )
        )

    return pages
