"""Batch export pipeline.

Plans animation-level tasks from selected assets, renders them concurrently
through a pluggable render engine and assembles one archive.
"""

from actionhub.core.export.archive import ZipArchiveWriter, zip_stored
from actionhub.core.export.assembly import INDEX_FILE_NAME, ArchiveAssembler
from actionhub.core.export.engines import DirectoryRenderEngine
from actionhub.core.export.errors import (
    ArchiveAssemblyError,
    ExportError,
    RenderCancelled,
    RenderError,
    ScanError,
)
from actionhub.core.export.executor import ExportExecutor, export_batch
from actionhub.core.export.models import (
    AnimationAsset,
    AssetStatus,
    AssetStatusPolicy,
    ExportConfig,
    FramesOutput,
    OutputFormat,
    RenderResult,
    RenderTask,
    SpritePackaging,
    VideoOutput,
)
from actionhub.core.export.outcome import ExportSummary, TaskOutcome, TaskState
from actionhub.core.export.planner import ExportPlan, ExportPlanner
from actionhub.core.export.protocols import ArchiveWriter, ExportCallbacks, RenderEngine
from actionhub.core.export.status import AssetStatusTracker

__all__ = [
    "INDEX_FILE_NAME",
    "AnimationAsset",
    "ArchiveAssembler",
    "ArchiveAssemblyError",
    "ArchiveWriter",
    "AssetStatus",
    "AssetStatusPolicy",
    "AssetStatusTracker",
    "DirectoryRenderEngine",
    "ExportCallbacks",
    "ExportConfig",
    "ExportError",
    "ExportExecutor",
    "ExportPlan",
    "ExportPlanner",
    "ExportSummary",
    "FramesOutput",
    "OutputFormat",
    "RenderCancelled",
    "RenderEngine",
    "RenderError",
    "RenderResult",
    "RenderTask",
    "ScanError",
    "SpritePackaging",
    "TaskOutcome",
    "TaskState",
    "VideoOutput",
    "ZipArchiveWriter",
    "export_batch",
    "zip_stored",
]
