"""Shared utilities for ActionHub."""

from actionhub.core.utils.json import dumps_json, read_json, write_json
from actionhub.core.utils.math import clamp, digits, finite_or

__all__ = [
    "clamp",
    "digits",
    "dumps_json",
    "finite_or",
    "read_json",
    "write_json",
]
