"""Render engine backed by pre-rendered output on disk.

Layout under an asset's ``source`` directory::

    <source>/<animation>/frame_00000.png   (frame sequences, png or jpg)
    <source>/<animation>.mp4               (videos, mp4 or webm)
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from actionhub.core.export.errors import RenderCancelled, RenderError, ScanError
from actionhub.core.export.models import (
    AnimationAsset,
    FramesOutput,
    RenderResult,
    RenderTask,
    VideoOutput,
)

logger = logging.getLogger(__name__)

FRAME_EXTENSIONS = ("png", "jpg")
VIDEO_EXTENSIONS = ("mp4", "webm")


def _frame_files(directory: Path) -> list[Path]:
    for ext in FRAME_EXTENSIONS:
        files = sorted(directory.glob(f"frame_*.{ext}"))
        if files:
            return files
    return []


class DirectoryRenderEngine:
    """Serves frames and videos that were rendered ahead of time.

    Args:
        max_concurrent: Number of renders allowed to read from disk at once
    """

    def __init__(self, max_concurrent: int = 4) -> None:
        self._semaphore = asyncio.Semaphore(max(1, max_concurrent))

    def _source_dir(self, asset: AnimationAsset) -> Path:
        if asset.source is None or not Path(asset.source).is_dir():
            raise ScanError(asset.id, f"source directory not found: {asset.source}")
        return Path(asset.source)

    async def scan(self, asset: AnimationAsset) -> list[str]:
        source = self._source_dir(asset)
        names: set[str] = set()
        for entry in source.iterdir():
            if entry.is_dir() and _frame_files(entry):
                names.add(entry.name)
            elif entry.is_file() and entry.suffix.lstrip(".").lower() in VIDEO_EXTENSIONS:
                names.add(entry.stem)
        if not names:
            raise ScanError(asset.id, f"no animations under {source}")
        return sorted(names)

    async def render(self, task: RenderTask) -> RenderResult:
        async with self._semaphore:
            if task.is_cancelled():
                raise RenderCancelled(task.label)
            try:
                source = self._source_dir(task.asset)
            except ScanError as e:
                raise RenderError(task.asset.id, task.animation, str(e)) from e

            if task.format.is_sequence:
                return await asyncio.to_thread(self._read_frames, task, source)
            return await asyncio.to_thread(self._read_video, task, source)

    def _read_frames(self, task: RenderTask, source: Path) -> RenderResult:
        files = _frame_files(source / task.animation)
        if not files:
            raise RenderError(task.asset.id, task.animation, "no frame images found")

        frames: list[bytes] = []
        for path in files:
            if task.is_cancelled():
                raise RenderCancelled(task.label)
            frames.append(path.read_bytes())

        ext = files[0].suffix.lstrip(".").lower()
        logger.debug(f"Loaded {len(frames)} {ext} frame(s) for {task.label}")
        return RenderResult(total_frames=len(frames), output=FramesOutput(frames=frames, image_ext=ext))

    def _read_video(self, task: RenderTask, source: Path) -> RenderResult:
        preferred = task.format.extension
        candidates = [preferred] + [ext for ext in VIDEO_EXTENSIONS if ext != preferred]
        for ext in candidates:
            path = source / f"{task.animation}.{ext}"
            if path.is_file():
                frames = max(1, round(task.fps * task.duration))
                return RenderResult(total_frames=frames, output=VideoOutput(data=path.read_bytes(), ext=ext))
        raise RenderError(task.asset.id, task.animation, "no video file found")
