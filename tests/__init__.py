"""Test suite for actionhub.

Test Structure:
- unit/: Unit tests for individual components
  - naming/: canonical action names, slug parsing, manifests, derived paths
  - atlas/: trimming, shelf packing, page encoding
  - export/: planner, executor, assembly, archive writer, render engines
  - config/: config loading
  - utils/: logging, JSON and math helpers
  - cli/: command-line entry points
- conftest.py: Shared fixtures (PNG factory, fake render engine, asset dirs)
"""
