"""Archive path derivation for resolved actions."""

from __future__ import annotations

from enum import Enum

from actionhub.core.naming.models import ActionSpec, Delivery, DerivedPaths, DirectionSet, TimingType
from actionhub.core.naming.sanitize import sanitize_path, sanitize_path_segment
from actionhub.core.naming.slug import DEFAULT_VARIANT

SEQUENCE_FORMATS = frozenset({"png-sequence", "jpg-sequence"})
DEFAULT_VIDEO_EXT = "mp4"


def delivery_for_format(output_format: str | Enum) -> Delivery:
    """Frame-sequence formats deliver sprites; everything else a preview video."""
    value = output_format.value if isinstance(output_format, Enum) else output_format
    return Delivery.SPRITE if value in SEQUENCE_FORMATS else Delivery.PREVIEW


def build_base_name(
    action: str,
    variant: str,
    direction: DirectionSet,
    timing: TimingType,
    fps: int,
    frames: int,
) -> str:
    """Build ``action_variant_dir_type_<fps>fps_<frames>f``.

    Example:
        >>> build_base_name("idle", "00", DirectionSet.LR, TimingType.LOOP, 30, 150)
        'idle_00_LR_loop_30fps_150f'
    """
    safe_action = sanitize_path_segment(action)
    safe_variant = sanitize_path_segment(variant or DEFAULT_VARIANT)
    return sanitize_path_segment(
        f"{safe_action}_{safe_variant}_{direction.value}_{timing.value}_{int(fps)}fps_{int(frames)}f"
    )


def build_derived_paths(
    spec: ActionSpec,
    delivery: Delivery,
    fps: int,
    frames: int,
    output_ext: str | None = None,
) -> DerivedPaths:
    """Derive the output and metadata locations for one task.

    Args:
        spec: Resolved action spec
        delivery: Sprite (frame output) or preview (single video)
        fps: Export frame rate
        frames: Rendered frame count
        output_ext: Video extension for preview delivery (default mp4)

    Returns:
        DerivedPaths; sprite deliveries carry ``output_base_path``,
        preview deliveries ``output_file_path``
    """
    base_name = build_base_name(spec.action, spec.variant, spec.direction, spec.timing, fps, frames)
    view = sanitize_path_segment(spec.view.value)
    category = sanitize_path_segment(spec.category)
    metadata_path = (
        f"metadata/derived/{delivery.value}/{view}/{sanitize_path(spec.canonical_name)}.json"
    )

    if delivery is Delivery.SPRITE:
        return DerivedPaths(
            delivery=delivery,
            view=spec.view,
            category=category,
            canonical_name=spec.canonical_name,
            base_name=base_name,
            output_base_path=f"sprite/{view}/{category}/{base_name}",
            metadata_path=metadata_path,
        )

    ext = sanitize_path_segment((output_ext or DEFAULT_VIDEO_EXT).lstrip("."))
    return DerivedPaths(
        delivery=delivery,
        view=spec.view,
        category=category,
        canonical_name=spec.canonical_name,
        base_name=base_name,
        output_file_path=f"preview/{view}/{category}/{base_name}.{ext}",
        metadata_path=metadata_path,
    )
