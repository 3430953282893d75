"""Render engine implementations."""

from actionhub.core.export.engines.directory import DirectoryRenderEngine

__all__ = ["DirectoryRenderEngine"]
