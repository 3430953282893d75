"""Tests for the scan phase."""

from __future__ import annotations

import asyncio

import pytest

from actionhub.core.export.models import AnimationAsset, AssetStatus, ExportConfig, OutputFormat
from actionhub.core.export.planner import ExportPlanner
from actionhub.core.export.status import AssetStatusTracker


@pytest.mark.asyncio
async def test_plan_cross_product_in_selection_order(fake_engine_factory) -> None:
    """Tasks follow asset order, then animation order."""
    engine = fake_engine_factory({"a": ["idle", "run"], "b": ["jump"]})
    assets = [AnimationAsset(id="a", name="A"), AnimationAsset(id="b", name="B")]
    config = ExportConfig(fps=24, format=OutputFormat.WEBM_VP9)

    plan = await ExportPlanner(engine, AssetStatusTracker()).plan(assets, config, asyncio.Event())

    assert [(t.asset.id, t.animation) for t in plan.tasks] == [("a", "idle"), ("a", "run"), ("b", "jump")]
    assert plan.total == 3
    assert all(t.fps == 24 and t.format is OutputFormat.WEBM_VP9 for t in plan.tasks)
    assert assets[0].animation_names == ["idle", "run"]
    assert all(a.status is AssetStatus.WAITING for a in assets)


@pytest.mark.asyncio
async def test_scan_failure_isolated(fake_engine_factory) -> None:
    """A failed scan marks only that asset failed."""
    engine = fake_engine_factory({"ok": ["idle"]})
    bad = AnimationAsset(id="bad", name="Bad")
    ok = AnimationAsset(id="ok", name="Ok")

    plan = await ExportPlanner(engine, AssetStatusTracker()).plan([bad, ok], ExportConfig(), asyncio.Event())

    assert bad.status is AssetStatus.FAILED
    assert ok.status is AssetStatus.WAITING
    assert plan.failed_assets == ["bad"]
    assert [t.animation for t in plan.tasks] == ["idle"]


@pytest.mark.asyncio
async def test_cancel_stops_scanning(fake_engine_factory) -> None:
    """A pre-set cancel token yields no tasks."""
    engine = fake_engine_factory({"a": ["idle"]})
    token = asyncio.Event()
    token.set()

    plan = await ExportPlanner(engine, AssetStatusTracker()).plan(
        [AnimationAsset(id="a", name="A")], ExportConfig(), token
    )
    assert plan.tasks == []
