"""Shared pytest fixtures for actionhub tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import io
from pathlib import Path

from PIL import Image
import pytest

from actionhub.core.export.errors import RenderCancelled, RenderError, ScanError
from actionhub.core.export.models import (
    AnimationAsset,
    FramesOutput,
    RenderResult,
    RenderTask,
    VideoOutput,
)
from actionhub.core.naming.models import NamingConfig

# ============================================================================
# Image Fixtures
# ============================================================================


def make_png(
    width: int,
    height: int,
    box: tuple[int, int, int, int] | None = None,
    color: tuple[int, int, int, int] = (255, 0, 0, 255),
) -> bytes:
    """Encode an RGBA PNG that is transparent except for ``box`` (x0, y0, x1, y1).

    ``box=None`` fills the whole frame.
    """
    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    if box is None:
        box = (0, 0, width, height)
    x0, y0, x1, y1 = box
    image.paste(Image.new("RGBA", (x1 - x0, y1 - y0), color), (x0, y0))
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_factory() -> Callable[..., bytes]:
    """Factory for small PNG frames."""
    return make_png


@pytest.fixture
def solid_frames() -> list[bytes]:
    """Three opaque 100x100 frames."""
    return [make_png(100, 100) for _ in range(3)]


# ============================================================================
# Naming Fixtures
# ============================================================================


@pytest.fixture
def naming_enabled() -> NamingConfig:
    """Naming config with default view/category/direction/timing."""
    return NamingConfig(enabled=True)


# ============================================================================
# Render Engine Fixtures
# ============================================================================


class FakeRenderEngine:
    """In-memory render engine.

    Args:
        animations: asset id -> animation names; missing ids fail to scan
        fail: (asset id, animation) pairs whose render raises RenderError
        frames: frames per render for sequence formats
        delay: seconds to sleep inside each render
    """

    def __init__(
        self,
        animations: dict[str, list[str]],
        fail: set[tuple[str, str]] | None = None,
        frames: int = 3,
        delay: float = 0.0,
    ) -> None:
        self.animations = animations
        self.fail = fail or set()
        self.frames = frames
        self.delay = delay
        self.rendered: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def scan(self, asset: AnimationAsset) -> list[str]:
        if asset.id not in self.animations:
            raise ScanError(asset.id, "cannot load skeleton")
        return list(self.animations[asset.id])

    async def render(self, task: RenderTask) -> RenderResult:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if task.is_cancelled():
                raise RenderCancelled(task.label)
            if (task.asset.id, task.animation) in self.fail:
                raise RenderError(task.asset.id, task.animation, "renderer crashed")

            self.rendered.append((task.asset.id, task.animation))
            if task.format.is_sequence:
                frames = [make_png(16, 16, (4, 4, 12, 12)) for _ in range(self.frames)]
                return RenderResult(
                    total_frames=len(frames),
                    output=FramesOutput(frames=frames, image_ext=task.format.extension),
                )
            total = round(task.fps * task.duration)
            return RenderResult(
                total_frames=total,
                output=VideoOutput(data=b"video:" + task.animation.encode(), ext=task.format.extension),
            )
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_engine_factory() -> Callable[..., FakeRenderEngine]:
    """Factory for FakeRenderEngine instances."""
    return FakeRenderEngine


# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """Asset directory with one frame-sequence and one video animation."""
    root = tmp_path / "Hero"
    idle = root / "idle"
    idle.mkdir(parents=True)
    for i in range(2):
        (idle / f"frame_{i:05d}.png").write_bytes(make_png(8, 8))
    (root / "run_01.mp4").write_bytes(b"fake-mp4")
    return root
