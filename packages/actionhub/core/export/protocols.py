"""Collaborator protocols for the export pipeline."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from actionhub.core.export.models import AnimationAsset, AssetStatus, RenderResult, RenderTask

ProgressCallback = Callable[[int, int, str], None]
AssetStatusCallback = Callable[[str, AssetStatus], None]


@runtime_checkable
class RenderEngine(Protocol):
    """Protocol for the engine that loads skeletons and renders animations.

    The engine owns its own concurrency bound; the executor may call
    ``render`` for every task at once.
    """

    async def scan(self, asset: AnimationAsset) -> list[str]:
        """Return the animation names of an asset.

        Raises:
            ScanError: If the asset cannot be loaded
        """
        ...

    async def render(self, task: RenderTask) -> RenderResult:
        """Render one animation.

        Implementations should check ``task.is_cancelled()`` at coarse
        points and raise RenderCancelled when it is set.

        Raises:
            RenderError: If rendering fails
            RenderCancelled: If the cancel token was observed
        """
        ...


@runtime_checkable
class ArchiveWriter(Protocol):
    """Protocol for the archive accumulator."""

    def add(self, path: str, data: bytes | str) -> None:
        """Add one entry (text is written as UTF-8)."""
        ...

    def build(self) -> bytes:
        """Produce the final archive bytes."""
        ...


@dataclass(frozen=True)
class ExportCallbacks:
    """Optional caller hooks.

    ``on_progress(completed, total, label)`` reports "at least N of total"
    finished; it is not a queue position.
    """

    on_progress: ProgressCallback | None = None
    on_asset_status: AssetStatusCallback | None = None

    def progress(self, completed: int, total: int, label: str) -> None:
        if self.on_progress is not None:
            self.on_progress(completed, total, label)

    def asset_status(self, asset_id: str, status: AssetStatus) -> None:
        if self.on_asset_status is not None:
            self.on_asset_status(asset_id, status)
