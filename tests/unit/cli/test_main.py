"""Unit tests for the actionhub command-line interface."""

from __future__ import annotations

import io
import json
from pathlib import Path
import zipfile

import pytest

from actionhub.cli.main import build_arg_parser, main


def test_parser_requires_subcommand() -> None:
    """Running without a subcommand is a usage error."""
    with pytest.raises(SystemExit):
        build_arg_parser().parse_args([])


def test_canonicalize_json(capsys: pytest.CaptureFixture[str]) -> None:
    """canonicalize --json prints the spec and derived paths."""
    assert main(["canonicalize", "Hero", "idle", "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["spec"]["canonical_name"] == "locomotion/idle_00"
    assert data["paths"]["output_file_path"] == "preview/VIEW_SIDE/locomotion/idle_00_LR_loop_30fps_150f.mp4"


def test_canonicalize_with_manifest(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """A manifest mapping overrides the inferred name."""
    manifest = tmp_path / "manifest.json"
    manifest.write_text(json.dumps({"mappings": {"chars/hero::Run": {"name": "locomotion/sprint_02"}}}))

    code = main(
        ["canonicalize", "Hero", "Run", "--asset-key", "chars/hero", "--manifest", str(manifest), "--json"]
    )

    assert code == 0
    assert json.loads(capsys.readouterr().out)["spec"]["canonical_name"] == "locomotion/sprint_02"


def test_pack_atlas(asset_dir: Path, tmp_path: Path) -> None:
    """pack-atlas writes a page image and document."""
    out = tmp_path / "atlas"
    assert main(["pack-atlas", str(asset_dir / "idle"), "--out", str(out), "--base-name", "idle"]) == 0

    assert (out / "idle.png").exists()
    doc = json.loads((out / "idle.json").read_text())
    assert len(doc["frames"]) == 2


def test_pack_atlas_missing_dir(tmp_path: Path) -> None:
    """A missing frame directory is reported, not raised."""
    assert main(["pack-atlas", str(tmp_path / "nope"), "--out", str(tmp_path)]) == 1


def test_manifest_template(asset_dir: Path, tmp_path: Path) -> None:
    """manifest-template lists every animation under the asset key."""
    out = tmp_path / "manifest.json"
    assert main(["manifest-template", str(asset_dir), "--asset-key", "chars/hero", "--out", str(out)]) == 0

    doc = json.loads(out.read_text())
    assert sorted(doc["mappings"]) == ["chars/hero::idle", "chars/hero::run_01"]


def test_export_named_archive(asset_dir: Path, tmp_path: Path) -> None:
    """export writes a canonical archive for a directory asset."""
    out = tmp_path / "out" / "export.zip"
    code = main(["export", str(asset_dir), "--out", str(out), "--naming", "--format", "png-sequence"])

    assert code == 0
    with zipfile.ZipFile(io.BytesIO(out.read_bytes())) as zf:
        names = zf.namelist()
    assert "export_index.json" in names
    assert "sprite/VIEW_SIDE/locomotion/idle_00_LR_loop_30fps_2f/frame_00000.png" in names


def test_export_bad_config(tmp_path: Path, asset_dir: Path) -> None:
    """An invalid config file fails before exporting."""
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"fps": -1}))
    assert main(["export", str(asset_dir), "--out", str(tmp_path / "x.zip"), "--config", str(bad)]) == 1


def test_export_defaults_out_to_output_dir(asset_dir: Path, tmp_path: Path) -> None:
    """Without --out the archive lands in the app config's output_dir."""
    app_config = tmp_path / "actionhub.json"
    app_config.write_text(json.dumps({"output_dir": str(tmp_path / "exports")}))

    code = main(["export", str(asset_dir), "--app-config", str(app_config), "--format", "png-sequence"])

    assert code == 0
    assert (tmp_path / "exports" / "actionhub_export.zip").exists()


def test_export_fps_limited_to_presets(asset_dir: Path, tmp_path: Path) -> None:
    """--fps accepts only the preset frame rates."""
    parser = build_arg_parser()
    assert parser.parse_args(["export", str(asset_dir), "--fps", "60"]).fps == 60
    with pytest.raises(SystemExit):
        parser.parse_args(["export", str(asset_dir), "--fps", "25"])
