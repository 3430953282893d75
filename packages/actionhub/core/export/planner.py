"""Scan phase: expand selected assets into animation-level render tasks."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

from actionhub.core.export.models import AnimationAsset, AssetStatus, ExportConfig, RenderTask
from actionhub.core.export.protocols import RenderEngine
from actionhub.core.export.status import AssetStatusTracker

logger = logging.getLogger(__name__)


@dataclass
class ExportPlan:
    """Tasks for every surviving asset, plus the assets that failed to scan."""

    tasks: list[RenderTask] = field(default_factory=list)
    failed_assets: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.tasks)


class ExportPlanner:
    """Builds the task list for a batch.

    A scan failure marks that asset ``failed`` and excludes it; the
    remaining assets are still scanned.
    """

    def __init__(self, engine: RenderEngine, tracker: AssetStatusTracker) -> None:
        self._engine = engine
        self._tracker = tracker

    async def plan(
        self,
        assets: Sequence[AnimationAsset],
        config: ExportConfig,
        cancel_token: asyncio.Event,
    ) -> ExportPlan:
        """Scan assets and build the cross-product of assets x animations.

        Args:
            assets: Selected assets, in selection order
            config: Batch configuration (render parameters)
            cancel_token: Shared cancellation token

        Returns:
            ExportPlan with tasks in selection order
        """
        for asset in assets:
            self._tracker.begin(asset)

        plan = ExportPlan()
        for asset in assets:
            if cancel_token.is_set():
                logger.warning("Export cancelled during scan")
                break

            try:
                animations = list(await self._engine.scan(asset))
            except Exception as e:
                logger.warning(f"Scan failed for asset '{asset.name}': {e}")
                self._tracker.transition(asset, AssetStatus.FAILED)
                plan.failed_assets.append(asset.id)
                continue

            asset.animation_names = animations
            logger.debug(f"Asset '{asset.name}' has {len(animations)} animation(s): {animations}")
            plan.tasks.extend(
                RenderTask.from_config(asset, animation, config, cancel_token)
                for animation in animations
            )

        logger.info(
            f"Planned {plan.total} task(s) from {len(assets) - len(plan.failed_assets)} asset(s)"
            + (f", {len(plan.failed_assets)} failed to scan" if plan.failed_assets else "")
        )
        return plan
