"""Command-line interface for ActionHub.

Subcommands:
    canonicalize       Resolve an animation name to its canonical action and paths
    pack-atlas         Pack a directory of frames into sprite atlas pages
    manifest-template  Write an editable naming manifest for an asset
    export             Batch-export pre-rendered assets into one archive
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys

from rich.console import Console
from rich.table import Table

from actionhub.core.atlas import AtlasError, AtlasPackOptions, pack_frames_to_atlas
from actionhub.core.config.loader import (
    configure_logging,
    load_app_config,
    load_export_config,
    load_naming_manifest,
)
from actionhub.core.config.models import FPS_PRESETS, RESOLUTION_PRESETS, AppConfig
from actionhub.core.export import (
    AnimationAsset,
    ArchiveAssemblyError,
    AssetStatus,
    AssetStatusPolicy,
    DirectoryRenderEngine,
    ExportCallbacks,
    ExportConfig,
    ExportSummary,
    OutputFormat,
    ScanError,
    SpritePackaging,
    export_batch,
)
from actionhub.core.naming import (
    NamingConfig,
    ViewId,
    build_derived_paths,
    build_manifest_template,
    delivery_for_format,
    infer_action_spec,
)
from actionhub.core.utils.json import dumps_json, write_json

console = Console()
logger = logging.getLogger(__name__)

FRAME_GLOBS = ("*.png", "*.jpg", "*.jpeg")
DEFAULT_ARCHIVE_NAME = "actionhub_export.zip"


def _naming_config(args: argparse.Namespace, base: NamingConfig | None = None) -> NamingConfig:
    """Overlay naming flags onto a base naming config."""
    base = base or NamingConfig()
    updates: dict = {"enabled": True}
    if getattr(args, "manifest", None):
        updates["manifest"] = load_naming_manifest(args.manifest)
    if getattr(args, "view", None):
        updates["view"] = ViewId(args.view)
    return base.model_copy(update=updates)


def cmd_canonicalize(args: argparse.Namespace) -> int:
    """Print the resolved action spec and archive paths for one animation."""
    naming = _naming_config(args)
    output_format = OutputFormat(args.format)

    spec = infer_action_spec(args.asset, args.animation, naming, asset_key=args.asset_key)
    paths = build_derived_paths(
        spec,
        delivery_for_format(output_format),
        fps=args.fps,
        frames=args.frames,
        output_ext=None if output_format.is_sequence else output_format.extension,
    )

    if args.json:
        console.print_json(dumps_json({"spec": spec.model_dump(mode="json"), "paths": paths.model_dump(mode="json")}))
        return 0

    table = Table(title=f"{args.asset} / {args.animation}", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("canonical name", spec.canonical_name)
    table.add_row("category", spec.category)
    table.add_row("action", spec.action)
    table.add_row("variant", spec.variant)
    table.add_row("direction", spec.direction.value)
    table.add_row("timing", spec.timing.value)
    table.add_row("view", spec.view.value)
    table.add_row("output", paths.output_path)
    table.add_row("metadata", paths.metadata_path)
    console.print(table)
    return 0


def _read_frames(directory: Path) -> list[bytes]:
    files: list[Path] = []
    for pattern in FRAME_GLOBS:
        files = sorted(directory.glob(pattern))
        if files:
            break
    return [f.read_bytes() for f in files]


def cmd_pack_atlas(args: argparse.Namespace) -> int:
    """Pack every frame image in a directory into atlas pages."""
    frames_dir = Path(args.frames).resolve()
    if not frames_dir.is_dir():
        console.print(f"[red]ERROR: Frames directory not found: {frames_dir}[/red]")
        return 1

    frames = _read_frames(frames_dir)
    if not frames:
        console.print(f"[red]ERROR: No frame images in {frames_dir}[/red]")
        return 1

    options = AtlasPackOptions(max_size=args.max_size, padding=args.padding, trim=not args.no_trim)
    base_name = args.base_name or frames_dir.name
    try:
        pages = pack_frames_to_atlas(frames, base_name, options)
    except AtlasError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

    out_dir = Path(args.out).resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    for page in pages:
        (out_dir / page.image_file_name).write_bytes(page.image_bytes)
        write_json(out_dir / page.json_file_name, page.document)
        size = page.document["meta"]["size"]
        console.print(f"[green]✅ {page.image_file_name}[/green] {size['w']}x{size['h']}")

    console.print(f"Packed {len(frames)} frame(s) into {len(pages)} page(s) in {out_dir}")
    return 0


def _asset_from_dir(path: Path) -> AnimationAsset:
    return AnimationAsset(id=path.name, name=path.name, asset_key=path.name, source=path)


def cmd_manifest_template(args: argparse.Namespace) -> int:
    """Scan an asset directory and write a manifest template for it."""
    asset_dir = Path(args.asset_dir).resolve()
    asset = _asset_from_dir(asset_dir)
    if args.asset_key:
        asset.asset_key = args.asset_key

    try:
        animations = asyncio.run(DirectoryRenderEngine().scan(asset))
    except ScanError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

    naming = _naming_config(args)
    manifest = build_manifest_template(asset.asset_key, animations, naming)
    out_path = Path(args.out).resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    write_json(out_path, manifest)
    console.print(f"[green]📄 Manifest template with {len(manifest['mappings'])} mapping(s):[/green] {out_path}")
    return 0


def _build_export_config(args: argparse.Namespace, app_config: AppConfig) -> ExportConfig:
    config = load_export_config(args.config) if args.config else app_config.export

    updates: dict = {}
    if args.format:
        updates["format"] = OutputFormat(args.format)
    if args.fps:
        updates["fps"] = args.fps
    if args.duration:
        updates["duration"] = args.duration
    if args.resolution:
        preset = RESOLUTION_PRESETS[args.resolution]
        updates["width"] = preset.width
        updates["height"] = preset.height
    if args.atlas:
        updates["sprite_packaging"] = SpritePackaging.ATLAS
    if args.strict:
        updates["asset_status_policy"] = AssetStatusPolicy.STRICT
    if args.max_concurrent:
        updates["max_concurrent_tasks"] = args.max_concurrent
    if args.naming or args.manifest:
        updates["naming"] = _naming_config(args, config.naming)

    if not updates:
        return config
    # Re-validate so flag values get the same checks as file values
    return ExportConfig.model_validate({**config.model_dump(by_alias=True), **updates})


def _print_summary(summary: ExportSummary, assets: list[AnimationAsset]) -> None:
    table = Table(title="Export Results", show_header=True)
    table.add_column("Asset", style="cyan")
    table.add_column("Status", style="white")
    for asset in assets:
        style = "green" if asset.status is AssetStatus.COMPLETED else "red"
        table.add_row(asset.name, f"[{style}]{asset.status.value}[/{style}]")
    console.print()
    console.print(table)

    console.print(f"Completed: {summary.completed}/{summary.total}")
    console.print(f"Duration: {summary.total_duration_ms:.0f}ms ({summary.total_duration_ms / 1000:.1f}s)")
    if summary.failures:
        console.print(f"\n[red]Failed tasks: {len(summary.failures)}[/red]")
        for failure in summary.failures:
            console.print(f"   - {failure.label}: {failure.error}")
    if summary.partial_failures:
        console.print(f"[yellow]Partial failures: {', '.join(summary.partial_failures)}[/yellow]")
    if summary.cancelled:
        console.print("[yellow]Export was cancelled[/yellow]")


def cmd_export(args: argparse.Namespace) -> int:
    """Export every animation of the given asset directories into one archive."""
    try:
        app_config = load_app_config(args.app_config)
        config = _build_export_config(args, app_config)
    except Exception as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        return 1

    configure_logging(app_config)

    assets = [_asset_from_dir(Path(p).resolve()) for p in args.assets]
    out_path = Path(args.out or Path(app_config.output_dir) / DEFAULT_ARCHIVE_NAME).resolve()

    def on_progress(completed: int, total: int, label: str) -> None:
        console.print(f"[{completed}/{total}] {label}")

    callbacks = ExportCallbacks(on_progress=on_progress)
    engine = DirectoryRenderEngine(max_concurrent=args.engine_concurrency)

    console.print(f"[bold]🚀 Exporting {len(assets)} asset(s) as {config.format.value}...[/bold]")
    try:
        summary = asyncio.run(export_batch(assets, config, engine, callbacks))
    except ArchiveAssemblyError as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(summary.archive)

    _print_summary(summary, assets)
    console.print(f"\n[green]📦 Archive saved to:[/green] {out_path} ({summary.byte_count} bytes)")

    if summary.completed == 0 and summary.total > 0:
        return 1
    return 0 if not summary.failed_assets else 1


def _add_naming_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--manifest", help="Path to a naming manifest (.json/.yaml)")
    p.add_argument("--view", choices=[v.value for v in ViewId], help="Default camera view")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="actionhub",
        description="ActionHub - batch export and canonical naming for skeletal animations",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    formats = [f.value for f in OutputFormat]

    canon = sub.add_parser("canonicalize", help="Resolve an animation to its canonical action")
    canon.add_argument("asset", help="Asset display name")
    canon.add_argument("animation", help="Raw animation name")
    canon.add_argument("--asset-key", default=None, help="Asset key used for manifest lookups")
    canon.add_argument("--format", choices=formats, default=OutputFormat.MP4.value)
    canon.add_argument("--fps", type=int, default=30)
    canon.add_argument("--frames", type=int, default=150)
    canon.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    _add_naming_args(canon)
    canon.set_defaults(func=cmd_canonicalize)

    atlas = sub.add_parser("pack-atlas", help="Pack a frame directory into atlas pages")
    atlas.add_argument("frames", help="Directory of frame images (sorted by name)")
    atlas.add_argument("--out", required=True, help="Output directory for pages")
    atlas.add_argument("--base-name", default=None, help="Base name for frame keys (default: directory name)")
    atlas.add_argument("--max-size", type=int, default=2048)
    atlas.add_argument("--padding", type=int, default=2)
    atlas.add_argument("--no-trim", action="store_true", help="Keep full frame rectangles")
    atlas.set_defaults(func=cmd_pack_atlas)

    template = sub.add_parser("manifest-template", help="Write a naming manifest template")
    template.add_argument("asset_dir", help="Asset directory with pre-rendered animations")
    template.add_argument("--asset-key", default=None, help="Manifest key prefix (default: directory name)")
    template.add_argument("--out", required=True, help="Output manifest path (.json)")
    _add_naming_args(template)
    template.set_defaults(func=cmd_manifest_template)

    export = sub.add_parser("export", help="Batch-export asset directories into one zip")
    export.add_argument("assets", nargs="+", help="Asset directories")
    export.add_argument(
        "--out",
        default=None,
        help=f"Output archive path (.zip), default <output_dir>/{DEFAULT_ARCHIVE_NAME} from the app config",
    )
    export.add_argument("--config", default=None, help="Export config (.json/.yaml)")
    export.add_argument("--app-config", default=None, help="App config (.json/.yaml)")
    export.add_argument("--format", choices=formats, default=None)
    export.add_argument("--fps", type=int, choices=FPS_PRESETS, default=None)
    export.add_argument("--duration", type=float, default=None)
    export.add_argument("--resolution", choices=sorted(RESOLUTION_PRESETS), default=None)
    export.add_argument("--atlas", action="store_true", help="Pack frame output into atlases")
    export.add_argument("--naming", action="store_true", help="Use the canonical archive layout")
    export.add_argument("--strict", action="store_true", help="Fail assets on any failed animation")
    export.add_argument("--max-concurrent", type=int, default=None, help="Executor task bound")
    export.add_argument("--engine-concurrency", type=int, default=4, help="Concurrent disk reads")
    _add_naming_args(export)
    export.set_defaults(func=cmd_export)

    return p


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
