"""Path-segment sanitizing and canonical-name normalization."""

from __future__ import annotations

import re

_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WHITESPACE = re.compile(r"\s+")
_LEADING_DOTS = re.compile(r"^\.+")
_TRAILING_DOTS = re.compile(r"\.+$")

UNNAMED = "unnamed"
MISC_CATEGORY = "misc"


def sanitize_path_segment(value: str | None) -> str:
    """Make a single archive path segment filesystem-safe.

    Illegal characters and whitespace runs become ``_``; a leading or
    trailing run of dots collapses to ``_``; an empty result is ``unnamed``.

    Example:
        >>> sanitize_path_segment("Run 01")
        'Run_01'
        >>> sanitize_path_segment("..hidden")
        '_hidden'
    """
    trimmed = (value or "").strip()
    replaced = _ILLEGAL_CHARS.sub("_", trimmed)
    replaced = _WHITESPACE.sub("_", replaced)
    replaced = _LEADING_DOTS.sub("_", replaced)
    replaced = _TRAILING_DOTS.sub("_", replaced)
    return replaced or UNNAMED


def split_name(value: str | None) -> list[str]:
    """Trim, strip outer slashes and split on ``/``, dropping empty segments."""
    raw = (value or "").strip().strip("/")
    return [part for part in raw.split("/") if part]


def normalize_canonical_name(value: str | None) -> str:
    """Normalize an arbitrary name to ``category/action`` form.

    Extra segments are merged into the action token, never dropped.

    Example:
        >>> normalize_canonical_name("locomotion/Run 01")
        'locomotion/Run_01'
        >>> normalize_canonical_name("walk")
        'misc/walk'
        >>> normalize_canonical_name("a/b/c")
        'a/b_c'
    """
    parts = [sanitize_path_segment(part) for part in split_name(value)]
    if not parts:
        return f"{MISC_CATEGORY}/{UNNAMED}"
    if len(parts) == 1:
        return f"{MISC_CATEGORY}/{parts[0]}"
    return f"{parts[0]}/{'_'.join(parts[1:])}"


canonicalize = normalize_canonical_name


def sanitize_path(path: str) -> str:
    """Sanitize every ``/``-separated segment of a relative archive path."""
    return "/".join(sanitize_path_segment(part) for part in path.split("/"))
