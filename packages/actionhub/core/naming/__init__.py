"""Action canonicalization engine.

Maps inconsistently named animations to a stable ``category/action_variant``
identifier and a matching archive layout.

Example:
    >>> from actionhub.core.naming import Delivery, NamingConfig, build_derived_paths, infer_action_spec
    >>> spec = infer_action_spec("Hero", "idle", NamingConfig(enabled=True))
    >>> build_derived_paths(spec, Delivery.PREVIEW, fps=30, frames=150).output_file_path
    'preview/VIEW_SIDE/locomotion/idle_00_LR_loop_30fps_150f.mp4'
"""

from actionhub.core.naming.manifest import (
    build_action_manifest,
    build_manifest_template,
    find_mapping,
    manifest_candidate_keys,
)
from actionhub.core.naming.models import (
    ActionSpec,
    Delivery,
    DerivedPaths,
    DirectionSet,
    ManifestDefaults,
    NamingConfig,
    NamingManifest,
    NamingMapping,
    TimingType,
    ViewId,
)
from actionhub.core.naming.paths import build_base_name, build_derived_paths, delivery_for_format
from actionhub.core.naming.resolver import infer_action_spec, strip_delivery_view_prefix
from actionhub.core.naming.sanitize import (
    canonicalize,
    normalize_canonical_name,
    sanitize_path_segment,
)
from actionhub.core.naming.slug import SLUG_STRATEGIES, SlugParts, parse_action_slug

__all__ = [
    "ActionSpec",
    "Delivery",
    "DerivedPaths",
    "DirectionSet",
    "ManifestDefaults",
    "NamingConfig",
    "NamingManifest",
    "NamingMapping",
    "SLUG_STRATEGIES",
    "SlugParts",
    "TimingType",
    "ViewId",
    "build_action_manifest",
    "build_base_name",
    "build_derived_paths",
    "build_manifest_template",
    "canonicalize",
    "delivery_for_format",
    "find_mapping",
    "infer_action_spec",
    "manifest_candidate_keys",
    "normalize_canonical_name",
    "parse_action_slug",
    "sanitize_path_segment",
    "strip_delivery_view_prefix",
]
