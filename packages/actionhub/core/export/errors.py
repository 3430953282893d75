"""Export pipeline errors.

ScanError and RenderError are isolated per asset/task by the executor and
never abort the batch. Only ArchiveAssemblyError escapes a batch run.
"""

from __future__ import annotations

from actionhub.core.errors import ActionHubError


class ExportError(ActionHubError):
    """Base exception for the export pipeline."""


class ScanError(ExportError):
    """An asset yielded no animation list.

    Attributes:
        asset_id: Asset that failed to scan
    """

    def __init__(self, asset_id: str, message: str):
        self.asset_id = asset_id
        super().__init__(f"Scan failed for asset '{asset_id}': {message}")


class RenderError(ExportError):
    """A render call failed for one animation.

    Attributes:
        asset_id: Owning asset
        animation: Animation that failed
    """

    def __init__(self, asset_id: str, animation: str, message: str):
        self.asset_id = asset_id
        self.animation = animation
        super().__init__(f"Render failed for '{asset_id}' / '{animation}': {message}")


class RenderCancelled(ExportError):
    """Raised by a render engine that observed the cancel token.

    Not treated as a failure: the task is recorded as cancelled.
    """


class ArchiveAssemblyError(ExportError):
    """The final archive could not be assembled."""
