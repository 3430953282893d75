"""Result types for export tasks and batch runs.

Task outcomes are immutable and never raise; errors are captured in the
outcome so one task can never take down its siblings.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from actionhub.core.atlas.models import AtlasPage
from actionhub.core.export.models import RenderResult
from actionhub.core.naming.models import ActionSpec, DerivedPaths


class TaskState(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TaskOutcome(BaseModel):
    """Outcome of one animation-level export task.

    Attributes:
        state: succeeded, failed or cancelled
        asset_id: Owning asset id
        asset_name: Owning asset display name
        asset_key: Owning asset manifest key
        animation: Animation name
        result: Render result (succeeded only)
        spec: Resolved action spec (naming enabled only)
        paths: Derived archive paths (naming enabled only)
        pages: Atlas pages (atlas packaging only)
        error: Error message (failed/cancelled)
    """

    state: TaskState
    asset_id: str
    asset_name: str
    asset_key: str = ""
    animation: str
    result: RenderResult | None = None
    spec: ActionSpec | None = None
    paths: DerivedPaths | None = None
    pages: list[AtlasPage] = Field(default_factory=list)
    error: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @property
    def success(self) -> bool:
        return self.state is TaskState.SUCCEEDED

    @property
    def label(self) -> str:
        return f"{self.asset_name} - {self.animation}"


def success_outcome(
    asset_id: str,
    asset_name: str,
    animation: str,
    result: RenderResult,
    asset_key: str = "",
    spec: ActionSpec | None = None,
    paths: DerivedPaths | None = None,
    pages: list[AtlasPage] | None = None,
) -> TaskOutcome:
    """Create a succeeded outcome."""
    return TaskOutcome(
        state=TaskState.SUCCEEDED,
        asset_id=asset_id,
        asset_name=asset_name,
        asset_key=asset_key,
        animation=animation,
        result=result,
        spec=spec,
        paths=paths,
        pages=pages or [],
    )


def failure_outcome(asset_id: str, asset_name: str, animation: str, error: str) -> TaskOutcome:
    """Create a failed outcome."""
    return TaskOutcome(
        state=TaskState.FAILED,
        asset_id=asset_id,
        asset_name=asset_name,
        animation=animation,
        error=error,
    )


def cancelled_outcome(
    asset_id: str,
    asset_name: str,
    animation: str,
    reason: str = "Cancelled by user",
) -> TaskOutcome:
    """Create a cancelled outcome. Cancellation is not a failure."""
    return TaskOutcome(
        state=TaskState.CANCELLED,
        asset_id=asset_id,
        asset_name=asset_name,
        animation=animation,
        error=f"[CANCELLED] {reason}",
    )


class ExportSummary(BaseModel):
    """Result of one batch run.

    Attributes:
        archive: Final archive bytes
        byte_count: Archive size in bytes
        total: Number of planned tasks
        completed: Number of tasks that produced output
        outcomes: Every task outcome, in task order
        failed_assets: Assets excluded by a scan failure
        partial_failures: Assets with at least one failed animation
        cancelled: Whether the run was cancelled
        total_duration_ms: Wall time of the run
    """

    archive: bytes = Field(repr=False)
    byte_count: int
    total: int
    completed: int
    outcomes: list[TaskOutcome] = Field(default_factory=list)
    failed_assets: list[str] = Field(default_factory=list)
    partial_failures: list[str] = Field(default_factory=list)
    cancelled: bool = False
    total_duration_ms: float = 0.0
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def failures(self) -> list[TaskOutcome]:
        return [o for o in self.outcomes if o.state is TaskState.FAILED]
