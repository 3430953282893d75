"""Tests for archive assembly outside the executor."""

from __future__ import annotations

import io
import json
import zipfile

import pytest

from actionhub.core.atlas.models import AtlasPage
from actionhub.core.export.assembly import (
    INDEX_FILE_NAME,
    ArchiveAssembler,
    build_metadata_document,
    find_path_collisions,
    legacy_entry_name,
    sequence_frame_name,
)
from actionhub.core.export.errors import ArchiveAssemblyError
from actionhub.core.export.models import ExportConfig, FramesOutput, RenderResult, VideoOutput
from actionhub.core.export.outcome import failure_outcome, success_outcome
from actionhub.core.naming.models import Delivery, NamingConfig
from actionhub.core.naming.paths import build_derived_paths
from actionhub.core.naming.resolver import infer_action_spec


def _open(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


def _page(name: str) -> AtlasPage:
    return AtlasPage(
        image_bytes=b"png",
        document={"frames": {}, "meta": {"image": f"{name}.png"}},
        image_file_name=f"{name}.png",
        json_file_name=f"{name}.json",
    )


def test_entry_names():
    assert sequence_frame_name(7, "png") == "frame_00007.png"
    assert legacy_entry_name("Hero Knight", "run 01", "mp4") == "Hero_Knight_run_01.mp4"


class TestLegacyLayout:
    def test_video_and_atlas_entries(self):
        """Videos are flat entries; atlas pages nest in an inner stored zip."""
        video = success_outcome("a", "Hero", "idle", RenderResult(150, VideoOutput(b"mp4-bytes")))
        atlas = success_outcome(
            "a",
            "Hero",
            "run",
            RenderResult(2, FramesOutput([b"f0", b"f1"])),
            pages=[_page("Hero_run")],
        )

        data = ArchiveAssembler(ExportConfig()).assemble([video, atlas])

        with _open(data) as zf:
            assert sorted(zf.namelist()) == ["Hero_idle.mp4", "Hero_run.zip"]
            assert zf.read("Hero_idle.mp4") == b"mp4-bytes"
            inner = zf.read("Hero_run.zip")
        with _open(inner) as inner_zf:
            assert inner_zf.namelist() == ["Hero_run.png", "Hero_run.json"]
            assert all(info.compress_type == zipfile.ZIP_STORED for info in inner_zf.infolist())

    def test_no_index_without_naming(self):
        data = ArchiveAssembler(ExportConfig()).assemble([], [failure_outcome("a", "Hero", "idle", "boom")])
        with _open(data) as zf:
            assert INDEX_FILE_NAME not in zf.namelist()


class TestCanonicalLayout:
    @pytest.fixture
    def config(self) -> ExportConfig:
        return ExportConfig(naming=NamingConfig(enabled=True))

    def _video_outcome(self, config: ExportConfig):
        spec = infer_action_spec("Hero", "idle", config.naming)
        paths = build_derived_paths(spec, Delivery.PREVIEW, fps=30, frames=150)
        result = RenderResult(150, VideoOutput(b"mp4-bytes"))
        return success_outcome("a", "Hero", "idle", result, asset_key="chars/hero", spec=spec, paths=paths)

    def test_video_metadata_and_index(self, config: ExportConfig):
        outcome = self._video_outcome(config)
        failed = failure_outcome("b", "Mage", "cast", "Render failed: boom")

        data = ArchiveAssembler(config).assemble([outcome], [failed])

        with _open(data) as zf:
            names = zf.namelist()
            index = json.loads(zf.read(INDEX_FILE_NAME))
            metadata = json.loads(zf.read("metadata/derived/preview/VIEW_SIDE/locomotion/idle_00.json"))

        assert "preview/VIEW_SIDE/locomotion/idle_00_LR_loop_30fps_150f.mp4" in names
        assert index["version"] == "1.0"
        assert [t["canonical_name"] for t in index["tasks"]] == ["locomotion/idle_00"]
        assert index["failures"] == [
            {"asset_id": "b", "asset": "Mage", "animation": "cast", "error": "Render failed: boom"}
        ]
        assert metadata["canonicalName"] == "locomotion/idle_00"
        assert metadata["frameCount"] == 150
        assert metadata["asset"]["key"] == "chars/hero"

    def test_metadata_document_fields(self, config: ExportConfig):
        doc = build_metadata_document(self._video_outcome(config), fps=30)
        assert doc["delivery"] == "preview"
        assert doc["view"] == "VIEW_SIDE"
        assert doc["timing"] == "loop"

    def test_missing_paths_is_assembly_error(self, config: ExportConfig):
        unnamed = success_outcome("a", "Hero", "idle", RenderResult(1, VideoOutput(b"x")))
        with pytest.raises(ArchiveAssemblyError, match="Missing derived paths"):
            ArchiveAssembler(config).assemble([unnamed])

    def test_metadata_without_paths_is_assembly_error(self):
        unnamed = success_outcome("a", "Hero", "idle", RenderResult(1, VideoOutput(b"x")))
        with pytest.raises(ArchiveAssemblyError, match="Missing derived paths"):
            build_metadata_document(unnamed, fps=30)

    def test_colliding_outcomes_rejected(self, config: ExportConfig):
        """The assembler refuses to overwrite one task's entries with another's."""
        first = self._video_outcome(config)
        second = first.model_copy(update={"animation": "idle copy"})

        collisions = find_path_collisions([first, second], naming_enabled=True)
        assert [(c.index, c.owner.animation) for c in collisions] == [(1, "idle")]

        with pytest.raises(ArchiveAssemblyError, match="would overwrite"):
            ArchiveAssembler(config).assemble([first, second])


def test_legacy_collisions_by_sanitized_name():
    video = RenderResult(150, VideoOutput(b"v"))
    outcomes = [
        success_outcome("a", "Hero", "Run 01", video),
        success_outcome("a", "Hero", "Run_01", video),
        success_outcome("a", "Hero", "Walk", video),
    ]

    collisions = find_path_collisions(outcomes, naming_enabled=False)

    assert [(c.index, c.path) for c in collisions] == [(1, "Hero_Run_01.mp4")]
