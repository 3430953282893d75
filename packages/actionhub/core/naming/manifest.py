"""Manifest lookup and manifest/action document builders."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
import logging
from typing import Any

from actionhub.core.naming.models import NamingConfig, NamingManifest, NamingMapping
from actionhub.core.naming.sanitize import normalize_canonical_name

logger = logging.getLogger(__name__)

MANIFEST_VERSION = "1.0"


def manifest_candidate_keys(animation_name: str, asset_keys: Iterable[str | None]) -> list[str]:
    """Ordered mapping keys to try for one animation.

    For every non-empty asset key, the ``::`` form comes before the legacy
    ``/`` form; the bare animation name is tried last.

    Example:
        >>> manifest_candidate_keys("run", ["chars/hero", "Hero"])
        ['chars/hero::run', 'chars/hero/run', 'Hero::run', 'Hero/run', 'run']
    """
    keys: list[str] = []
    for asset_key in asset_keys:
        if not asset_key:
            continue
        for key in (f"{asset_key}::{animation_name}", f"{asset_key}/{animation_name}"):
            if key not in keys:
                keys.append(key)
    keys.append(animation_name)
    return keys


def find_mapping(
    manifest: NamingManifest | None,
    asset_keys: Iterable[str | None],
    animation_name: str,
) -> NamingMapping | None:
    """Return the first manifest mapping along the candidate-key chain."""
    if manifest is None or not manifest.mappings:
        return None
    for key in manifest_candidate_keys(animation_name, asset_keys):
        mapping = manifest.mappings.get(key)
        if mapping is not None:
            logger.debug(f"Manifest hit for '{animation_name}' via key '{key}'")
            return mapping
    return None


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()


def build_manifest_template(
    asset_key: str,
    animation_names: Iterable[str],
    naming: NamingConfig,
    generated_date: str | None = None,
) -> dict[str, Any]:
    """Build a starter manifest for one asset.

    Every animation gets a ``"<assetKey>::<animation>"`` mapping with the
    suggested canonical name, ready for an artist to edit.

    Args:
        asset_key: Asset base path (or name when no path is known)
        animation_names: Animations found in the asset
        naming: Naming config supplying defaults
        generated_date: Timestamp override (defaults to now, UTC)

    Returns:
        Manifest document (validates as NamingManifest)
    """
    mappings: dict[str, dict[str, str]] = {}
    for animation in animation_names:
        raw = animation if "/" in animation else f"{naming.default_category}/{animation}"
        mappings[f"{asset_key}::{animation}"] = {"name": normalize_canonical_name(raw)}

    return {
        "version": MANIFEST_VERSION,
        "generated_date": generated_date or _now_iso(),
        "defaults": {
            "view": naming.view.value,
            "category": naming.default_category,
            "dir": naming.default_direction.value,
            "type": naming.default_timing.value,
        },
        "mappings": mappings,
    }


def build_action_manifest(
    asset_name: str,
    animations: Mapping[str, float],
    naming: NamingConfig,
    fps: int = 30,
    asset_key: str | None = None,
) -> dict[str, Any]:
    """Describe every animation of an asset by its canonical identity.

    Args:
        asset_name: Asset display name
        animations: Animation name -> duration in seconds
        naming: Naming config (manifest and defaults)
        fps: Frame rate used to derive frame counts
        asset_key: Asset base path used for manifest lookup

    Returns:
        Action manifest document
    """
    from actionhub.core.naming.resolver import infer_action_spec

    actions = []
    for animation, duration in animations.items():
        spec = infer_action_spec(
            asset_name=asset_name,
            asset_key=asset_key,
            animation_name=animation,
            naming=naming,
        )
        seconds = max(0.0, float(duration))
        actions.append(
            {
                "canonicalName": spec.canonical_name,
                "type": spec.timing.value,
                "frames": max(1, round(seconds * fps)),
                "duration": seconds,
                "dir_set": spec.direction.value,
                "view": spec.view.value,
                "fps": fps,
                "sourceAnimation": animation,
            }
        )

    return {
        "version": MANIFEST_VERSION,
        "asset": asset_name,
        "actions": actions,
    }
