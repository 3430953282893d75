"""Batch export executor.

Runs every planned task concurrently against the render engine, applies
naming and atlas packing to each successful result, then assembles one
archive once all tasks have settled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
import logging
import time
from typing import Any
import uuid

from actionhub.core.atlas.errors import AtlasError
from actionhub.core.atlas.models import AtlasPage
from actionhub.core.atlas.packer import pack_frames_to_atlas
from actionhub.core.export.archive import ZipArchiveWriter
from actionhub.core.export.assembly import ArchiveAssembler, find_path_collisions
from actionhub.core.export.errors import RenderCancelled, RenderError
from actionhub.core.export.models import (
    AnimationAsset,
    AssetStatus,
    AssetStatusPolicy,
    ExportConfig,
    FramesOutput,
    RenderResult,
    RenderTask,
    VideoOutput,
)
from actionhub.core.export.outcome import (
    ExportSummary,
    TaskOutcome,
    TaskState,
    cancelled_outcome,
    failure_outcome,
    success_outcome,
)
from actionhub.core.export.planner import ExportPlanner
from actionhub.core.export.protocols import ArchiveWriter, ExportCallbacks, RenderEngine
from actionhub.core.export.status import AssetStatusTracker
from actionhub.core.naming.models import Delivery
from actionhub.core.naming.paths import build_derived_paths, delivery_for_format
from actionhub.core.naming.resolver import infer_action_spec
from actionhub.core.naming.sanitize import sanitize_path_segment
from actionhub.core.utils.logging import get_logger

logger = logging.getLogger(__name__)

PREPARING_LABEL = "preparing"


class _ProgressCounter:
    """Settled-task counter. Only mutated from the event loop thread."""

    def __init__(self, total: int, callbacks: ExportCallbacks) -> None:
        self.total = total
        self.settled = 0
        self._callbacks = callbacks

    def start(self) -> None:
        self._callbacks.progress(0, self.total, PREPARING_LABEL)

    def settle(self, label: str) -> None:
        self.settled += 1
        self._callbacks.progress(self.settled, self.total, label)


class ExportExecutor:
    """Runs a batch export end to end.

    Example:
        >>> executor = ExportExecutor(engine)
        >>> summary = await executor.run(assets, ExportConfig(), callbacks)
        >>> Path("export.zip").write_bytes(summary.archive)
    """

    def __init__(
        self,
        engine: RenderEngine,
        writer_factory: Callable[[], ArchiveWriter] = ZipArchiveWriter,
    ) -> None:
        self.engine = engine
        self._writer_factory = writer_factory

    async def run(
        self,
        assets: Sequence[AnimationAsset],
        config: ExportConfig,
        callbacks: ExportCallbacks | None = None,
        cancel_token: asyncio.Event | None = None,
    ) -> ExportSummary:
        """Scan, render, package and archive the selected assets.

        Per-asset and per-task errors are isolated and reported in the
        summary; only archive assembly can fail the whole run.

        Args:
            assets: Selected assets (their ``status`` is updated in place)
            config: Batch configuration, fixed for the run
            callbacks: Optional progress and status hooks
            cancel_token: Set to cancel; no new task work starts afterwards

        Returns:
            ExportSummary with the archive bytes and per-task outcomes

        Raises:
            ArchiveAssemblyError: If the archive cannot be built
        """
        start_time = time.perf_counter()
        callbacks = callbacks or ExportCallbacks()
        cancel_token = cancel_token or asyncio.Event()
        batch_log = get_logger(__name__, batch_id=uuid.uuid4().hex[:8])

        tracker = AssetStatusTracker(callbacks)
        plan = await ExportPlanner(self.engine, tracker).plan(assets, config, cancel_token)
        batch_log.info(f"Exporting {plan.total} animation(s) as {config.format.value}")

        progress = _ProgressCounter(plan.total, callbacks)
        progress.start()

        outcomes = await self._execute_tasks(plan.tasks, config, tracker, progress)
        outcomes = self._fail_path_collisions(plan.tasks, outcomes, config, tracker)

        cancelled = cancel_token.is_set()
        if not cancelled:
            for asset in assets:
                if not asset.status.is_final:
                    tracker.transition(asset, AssetStatus.COMPLETED)
        else:
            batch_log.warning("Export cancelled; building archive from finished tasks")

        successes = [o for o in outcomes if o.success]
        failures = [o for o in outcomes if o.state is TaskState.FAILED]

        assembler = ArchiveAssembler(config, self._writer_factory)
        archive = await asyncio.to_thread(assembler.assemble, successes, failures)

        duration_ms = (time.perf_counter() - start_time) * 1000
        batch_log.info(
            f"Export finished: {len(successes)}/{plan.total} succeeded, {len(failures)} failed, "
            f"{len(archive)} bytes in {duration_ms:.0f}ms"
        )

        return ExportSummary(
            archive=archive,
            byte_count=len(archive),
            total=plan.total,
            completed=len(successes),
            outcomes=outcomes,
            failed_assets=plan.failed_assets,
            partial_failures=tracker.partial_failures,
            cancelled=cancelled,
            total_duration_ms=duration_ms,
            metadata={"format": config.format.value, "naming": config.naming.enabled},
        )

    async def _execute_tasks(
        self,
        tasks: list[RenderTask],
        config: ExportConfig,
        tracker: AssetStatusTracker,
        progress: _ProgressCounter,
    ) -> list[TaskOutcome]:
        """Execute all tasks in parallel, optionally bounded by a semaphore."""
        max_concurrent = config.max_concurrent_tasks

        if max_concurrent is not None:
            logger.debug(f"Executing {len(tasks)} task(s) (max {max_concurrent} concurrent)")
            semaphore = asyncio.Semaphore(max_concurrent)

            async def execute_with_limit(task: RenderTask) -> TaskOutcome:
                async with semaphore:
                    return await self._execute_task(task, config, tracker, progress)

            coros = [execute_with_limit(task) for task in tasks]
        else:
            logger.debug(f"Executing {len(tasks)} task(s) in parallel")
            coros = [self._execute_task(task, config, tracker, progress) for task in tasks]

        results = await asyncio.gather(*coros, return_exceptions=True)

        outcomes: list[TaskOutcome] = []
        for task, result in zip(tasks, results, strict=True):
            if isinstance(result, TaskOutcome):
                outcomes.append(result)
            else:
                logger.error(f"Task {task.label} raised outside its handler: {result!r}")
                outcomes.append(self._fail(task, config, tracker, str(result)))
        return outcomes

    def _fail_path_collisions(
        self,
        tasks: list[RenderTask],
        outcomes: list[TaskOutcome],
        config: ExportConfig,
        tracker: AssetStatusTracker,
    ) -> list[TaskOutcome]:
        """Turn successes that would overwrite an earlier task's entries into failures."""
        succeeded = [(i, outcome) for i, outcome in enumerate(outcomes) if outcome.success]
        collisions = find_path_collisions([outcome for _, outcome in succeeded], config.naming.enabled)
        if not collisions:
            return outcomes

        resolved = list(outcomes)
        for collision in collisions:
            position = succeeded[collision.index][0]
            resolved[position] = self._fail(
                tasks[position],
                config,
                tracker,
                f"Archive path '{collision.path}' already used by {collision.owner.label}",
            )
        return resolved

    async def _execute_task(
        self,
        task: RenderTask,
        config: ExportConfig,
        tracker: AssetStatusTracker,
        progress: _ProgressCounter,
    ) -> TaskOutcome:
        asset = task.asset
        try:
            if task.is_cancelled():
                return cancelled_outcome(asset.id, asset.name, task.animation)

            tracker.transition(asset, AssetStatus.EXPORTING)
            logger.debug(f"Rendering {task.label}")

            try:
                result = await self.engine.render(task)
            except RenderCancelled as e:
                logger.info(f"Render cancelled: {task.label}")
                return cancelled_outcome(asset.id, asset.name, task.animation, str(e) or "Cancelled by user")
            except Exception as e:
                return self._fail(task, config, tracker, f"Render failed: {e}")

            try:
                outcome = await self._finish_task(task, result, config)
            except (AtlasError, RenderError) as e:
                return self._fail(task, config, tracker, str(e))
            except Exception as e:
                logger.exception(f"Post-processing failed for {task.label}")
                return self._fail(task, config, tracker, f"Packaging failed: {e}")

            logger.info(f"Exported {task.label} ({result.total_frames} frames)")
            return outcome
        finally:
            progress.settle(task.label)

    def _fail(
        self,
        task: RenderTask,
        config: ExportConfig,
        tracker: AssetStatusTracker,
        error: str,
    ) -> TaskOutcome:
        asset = task.asset
        logger.warning(f"Task {task.label} failed: {error}")
        tracker.record_partial_failure(asset)
        if config.asset_status_policy is AssetStatusPolicy.STRICT:
            tracker.transition(asset, AssetStatus.FAILED)
        return failure_outcome(asset.id, asset.name, task.animation, error)

    async def _finish_task(
        self,
        task: RenderTask,
        result: RenderResult,
        config: ExportConfig,
    ) -> TaskOutcome:
        """Resolve naming and pack atlas pages for one rendered result."""
        asset = task.asset
        output = result.output
        spec = None
        paths = None

        if config.naming.enabled:
            delivery = delivery_for_format(config.format)
            if delivery is Delivery.SPRITE and not isinstance(output, FramesOutput):
                raise RenderError(asset.id, task.animation, "expected frame output for a sequence format")
            if delivery is Delivery.PREVIEW and not isinstance(output, VideoOutput):
                raise RenderError(asset.id, task.animation, "expected video output for a video format")

            spec = infer_action_spec(asset.name, task.animation, config.naming, asset_key=asset.asset_key)
            paths = build_derived_paths(
                spec,
                delivery,
                fps=config.fps,
                frames=result.total_frames,
                output_ext=output.ext if isinstance(output, VideoOutput) else None,
            )

        pages: list[AtlasPage] = []
        if config.uses_atlas and isinstance(output, FramesOutput) and output.frames:
            base_name = paths.base_name if paths else sanitize_path_segment(f"{asset.name}_{task.animation}")
            pages = await asyncio.to_thread(pack_frames_to_atlas, output.frames, base_name, config.atlas)

        return success_outcome(
            asset.id,
            asset.name,
            task.animation,
            result,
            asset_key=asset.asset_key,
            spec=spec,
            paths=paths,
            pages=pages,
        )


async def export_batch(
    assets: Sequence[AnimationAsset],
    config: ExportConfig,
    engine: RenderEngine,
    callbacks: ExportCallbacks | None = None,
    cancel_token: asyncio.Event | None = None,
    **kwargs: Any,
) -> ExportSummary:
    """Convenience wrapper around ``ExportExecutor.run``.

    Extra keyword arguments are passed to the ExportExecutor constructor.
    """
    return await ExportExecutor(engine, **kwargs).run(assets, config, callbacks, cancel_token)
