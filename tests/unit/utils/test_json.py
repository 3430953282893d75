"""Tests for JSON utility functions."""

from __future__ import annotations

from enum import Enum
import json
from pathlib import Path

import numpy as np
import pytest

from actionhub.core.atlas.models import Rect
from actionhub.core.naming.models import ActionSpec, DirectionSet, TimingType, ViewId
from actionhub.core.utils.json import dumps_json, read_json, write_json


class _Color(str, Enum):
    RED = "red"


@pytest.fixture
def temp_json_file(tmp_path):
    """Create a temporary JSON file path."""
    return tmp_path / "test.json"


def test_write_and_read_json(temp_json_file):
    """Test writing and reading JSON files."""
    data = {"string": "value", "number": 42, "list": [1, 2, 3], "nested": {"key": "value"}}
    write_json(temp_json_file, data)
    assert read_json(temp_json_file) == data


def test_write_json_creates_parent_dirs(tmp_path):
    """Test that write_json creates parent directories."""
    nested_path = tmp_path / "subdir" / "nested" / "test.json"
    write_json(nested_path, {"test": "value"})
    assert nested_path.exists()


def test_dumps_json_special_types():
    """Test serialization of Path, Enum and numpy values."""
    text = dumps_json(
        {
            "path": Path("a/b"),
            "enum": _Color.RED,
            "array": np.array([1, 2]),
            "int": np.int32(3),
            "float": np.float64(0.5),
        }
    )
    data = json.loads(text)
    assert data == {"path": "a/b", "enum": "red", "array": [1, 2], "int": 3, "float": 0.5}


def test_dumps_json_keeps_unicode():
    """Test that non-ASCII text is written as-is."""
    assert "导出" in dumps_json({"label": "导出"})


def test_read_json_requires_object(temp_json_file):
    """Test that a top-level array is rejected."""
    temp_json_file.write_text("[1, 2]")
    with pytest.raises(ValueError):
        read_json(temp_json_file)


def test_dumps_json_models_and_dataclasses():
    """Test that pydantic models and dataclasses are flattened."""
    spec = ActionSpec(
        canonical_name="locomotion/idle_00",
        category="locomotion",
        action="idle",
        variant="00",
        direction=DirectionSet.LR,
        timing=TimingType.LOOP,
        view=ViewId.SIDE,
    )
    data = json.loads(dumps_json({"spec": spec, "rect": Rect(1, 2, 3, 4)}))

    assert data["spec"]["canonical_name"] == "locomotion/idle_00"
    assert data["spec"]["view"] == "VIEW_SIDE"
    assert data["rect"] == {"x": 1, "y": 2, "w": 3, "h": 4}
