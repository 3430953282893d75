"""Action/variant parsing of the final canonical-name segment.

Parsing is an ordered tuple of named strategies; the first one that returns
a result wins. Each strategy can be exercised on its own.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import re
from typing import NamedTuple

from actionhub.core.naming.models import DirectionSet, TimingType
from actionhub.core.naming.sanitize import sanitize_path_segment

DEFAULT_VARIANT = "00"

_FULL_SUFFIX = re.compile(
    r"^(.*)_([^_]+)_(LR|4dir|8dir|none)_(loop|once)_([0-9]+)fps_([0-9]+)f$"
)
_NUMERIC_VARIANT = re.compile(r"^(.*)_([0-9]{2,})$")


@dataclass(frozen=True)
class SlugParts:
    """Pieces recovered from an action slug."""

    action: str
    variant: str
    direction: DirectionSet | None = None
    timing: TimingType | None = None


class SlugStrategy(NamedTuple):
    name: str
    parse: Callable[[str], SlugParts | None]


def _parse_full_suffix(slug: str) -> SlugParts | None:
    # action_variant_dir_type_<N>fps_<M>f, as produced by build_base_name
    match = _FULL_SUFFIX.match(slug)
    if not match:
        return None
    return SlugParts(
        action=sanitize_path_segment(match.group(1)),
        variant=sanitize_path_segment(match.group(2)),
        direction=DirectionSet(match.group(3)),
        timing=TimingType(match.group(4)),
    )


def _parse_numeric_variant(slug: str) -> SlugParts | None:
    match = _NUMERIC_VARIANT.match(slug)
    if not match:
        return None
    return SlugParts(
        action=sanitize_path_segment(match.group(1)),
        variant=sanitize_path_segment(match.group(2)),
    )


def _parse_last_token(slug: str) -> SlugParts | None:
    tokens = [token for token in slug.split("_") if token]
    if len(tokens) < 2:
        return None
    return SlugParts(
        action=sanitize_path_segment("_".join(tokens[:-1])),
        variant=sanitize_path_segment(tokens[-1]),
    )


def _parse_fallback(slug: str) -> SlugParts:
    return SlugParts(action=slug, variant=DEFAULT_VARIANT)


SLUG_STRATEGIES: tuple[SlugStrategy, ...] = (
    SlugStrategy("full_suffix", _parse_full_suffix),
    SlugStrategy("numeric_variant", _parse_numeric_variant),
    SlugStrategy("last_token", _parse_last_token),
    SlugStrategy("fallback", _parse_fallback),
)


def clean_slug(segment: str | None) -> str:
    """Drop any ``@suffix`` and sanitize what is left."""
    base = (segment or "").strip().split("@")[0]
    return sanitize_path_segment(base)


def parse_action_slug(segment: str | None) -> SlugParts:
    """Split the last canonical-name segment into action and variant.

    Example:
        >>> parse_action_slug("atk_heavy_LR_once_30fps_24f")
        SlugParts(action='atk', variant='heavy', direction=<DirectionSet.LR: 'LR'>, timing=<TimingType.ONCE: 'once'>)
        >>> parse_action_slug("run_01").variant
        '01'
        >>> parse_action_slug("idle").variant
        '00'
    """
    slug = clean_slug(segment)
    for strategy in SLUG_STRATEGIES:
        parts = strategy.parse(slug)
        if parts is not None:
            return parts
    # fallback always matches
    return _parse_fallback(slug)
