"""Resolve a raw animation name to its ActionSpec.

Precedence for the canonical name:
1. explicit manifest mapping (see ``manifest_candidate_keys``)
2. a ``delivery/view/category/...`` prefix embedded in the animation name
3. the raw name when it already contains a slash
4. ``<defaultCategory>/<rawName>``
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from actionhub.core.naming.manifest import find_mapping
from actionhub.core.naming.models import ActionSpec, NamingConfig, ViewId
from actionhub.core.naming.sanitize import (
    MISC_CATEGORY,
    UNNAMED,
    normalize_canonical_name,
    sanitize_path_segment,
    split_name,
)
from actionhub.core.naming.slug import parse_action_slug

logger = logging.getLogger(__name__)

PREFIX_DELIVERIES = frozenset({"sprite", "spine", "preview", "pose"})
PREFIX_VIEWS = frozenset(view.value for view in ViewId)


@dataclass(frozen=True)
class PrefixMatch:
    canonical_name: str
    view: ViewId


def strip_delivery_view_prefix(animation_name: str) -> PrefixMatch | None:
    """Detect and strip a ``delivery/view/`` prefix.

    Requires at least four segments: delivery, view, category and one or
    more action segments.

    Example:
        >>> strip_delivery_view_prefix("sprite/VIEW_TOP/combat/slash/01")
        PrefixMatch(canonical_name='combat/slash_01', view=<ViewId.TOP: 'VIEW_TOP'>)
    """
    parts = split_name(animation_name)
    if len(parts) < 4:
        return None

    delivery, view, category, *rest = parts
    if delivery not in PREFIX_DELIVERIES or view not in PREFIX_VIEWS:
        return None

    return PrefixMatch(
        canonical_name=normalize_canonical_name(f"{category}/{'_'.join(rest)}"),
        view=ViewId(view),
    )


def infer_action_spec(
    asset_name: str,
    animation_name: str,
    naming: NamingConfig,
    asset_key: str | None = None,
) -> ActionSpec:
    """Resolve one animation to its canonical identity.

    Args:
        asset_name: Asset display name (secondary manifest lookup prefix)
        animation_name: Raw animation name as authored
        naming: Naming config with defaults and optional manifest
        asset_key: Asset base path (primary manifest lookup prefix)

    Returns:
        Resolved ActionSpec

    Example:
        >>> spec = infer_action_spec("Hero", "idle", NamingConfig())
        >>> spec.canonical_name
        'locomotion/idle_00'
    """
    manifest = naming.manifest
    defaults = manifest.defaults if manifest else None
    mapping = find_mapping(manifest, [asset_key, asset_name], animation_name)
    prefix = strip_delivery_view_prefix(animation_name)

    view = (defaults.view if defaults else None) or (prefix.view if prefix else None) or naming.view
    default_category = (defaults.category if defaults else None) or naming.default_category

    if mapping is not None and mapping.name:
        source = mapping.name
    elif prefix is not None:
        source = prefix.canonical_name
    elif "/" in animation_name:
        source = animation_name
    else:
        source = f"{default_category}/{animation_name}"

    category_raw, _, last_raw = normalize_canonical_name(source).partition("/")
    category = sanitize_path_segment(
        (mapping.category if mapping else None) or category_raw or default_category or MISC_CATEGORY
    )

    parsed = parse_action_slug(last_raw or UNNAMED)
    action = sanitize_path_segment((mapping.action if mapping else None) or parsed.action)
    variant = sanitize_path_segment((mapping.variant if mapping else None) or parsed.variant)

    direction = (
        (mapping.direction if mapping else None)
        or parsed.direction
        or (defaults.direction if defaults else None)
        or naming.default_direction
    )
    timing = (
        (mapping.timing if mapping else None)
        or parsed.timing
        or (defaults.timing if defaults else None)
        or naming.default_timing
    )

    spec = ActionSpec(
        canonical_name=f"{category}/{sanitize_path_segment(f'{action}_{variant}')}",
        category=category,
        action=action,
        variant=variant,
        direction=direction,
        timing=timing,
        view=view,
    )
    logger.debug(f"Resolved '{animation_name}' ({asset_name}) -> {spec.canonical_name}")
    return spec
