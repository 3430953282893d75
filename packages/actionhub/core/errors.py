"""Base exception for ActionHub."""

from __future__ import annotations


class ActionHubError(Exception):
    """Base exception for all ActionHub domain errors."""
