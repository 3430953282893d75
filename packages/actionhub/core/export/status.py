"""Asset status bookkeeping for one batch run."""

from __future__ import annotations

import logging

from actionhub.core.export.models import AnimationAsset, AssetStatus
from actionhub.core.export.protocols import ExportCallbacks

logger = logging.getLogger(__name__)

_RANK = {
    AssetStatus.IDLE: 0,
    AssetStatus.WAITING: 1,
    AssetStatus.EXPORTING: 2,
    AssetStatus.COMPLETED: 3,
    AssetStatus.FAILED: 3,
}


class AssetStatusTracker:
    """Applies status transitions and notifies the caller.

    Within a run, transitions only move forward (``idle -> waiting ->
    exporting -> completed|failed``). A repeated status is a no-op and
    anything after a final status is ignored; ``begin`` resets an asset when
    a new run starts. Assets with failed animations are remembered
    separately so callers can surface partial failure even when the asset
    itself ends ``completed``.
    """

    def __init__(self, callbacks: ExportCallbacks | None = None) -> None:
        self._callbacks = callbacks or ExportCallbacks()
        self._partial_failures: dict[str, None] = {}

    def begin(self, asset: AnimationAsset) -> None:
        """Put a selected asset into ``waiting`` at the start of a run.

        Final states only hold for the run that produced them, so an asset
        exported again starts over regardless of its previous status.
        """
        if asset.status is not AssetStatus.WAITING:
            asset.status = AssetStatus.WAITING
            self._callbacks.asset_status(asset.id, AssetStatus.WAITING)

    def transition(self, asset: AnimationAsset, status: AssetStatus) -> bool:
        """Move an asset to ``status`` if the transition is allowed.

        Returns:
            True if the status changed
        """
        current = asset.status
        if current == status:
            return False
        if current.is_final:
            logger.debug(f"Ignoring {current.value} -> {status.value} for final asset '{asset.id}'")
            return False
        if _RANK[status] < _RANK[current]:
            logger.debug(f"Ignoring backwards transition {current.value} -> {status.value} for '{asset.id}'")
            return False

        asset.status = status
        self._callbacks.asset_status(asset.id, status)
        return True

    def record_partial_failure(self, asset: AnimationAsset) -> None:
        self._partial_failures[asset.id] = None

    @property
    def partial_failures(self) -> list[str]:
        """Asset ids with at least one failed animation, in first-seen order."""
        return list(self._partial_failures)
