"""JSON helpers shared by the archive assembler, CLI and config loader.

Archive documents (atlas pages, metadata sidecars, the export index) are
built from pydantic models, dataclasses and numpy scalars; ``dumps_json``
flattens all of them so callers can pass their values straight through.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from enum import Enum
import json
from pathlib import Path
from typing import Any

import numpy as np
from pydantic import BaseModel


def _to_jsonable(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Path):
        return obj.as_posix()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()
    return str(obj)


def dumps_json(obj: Any, indent: int | None = 2) -> str:
    """Serialize ``obj`` to JSON text, keeping non-ASCII characters."""
    return json.dumps(obj, indent=indent, ensure_ascii=False, default=_to_jsonable)


def write_json(path: str | Path, obj: Any) -> None:
    """Write ``obj`` as UTF-8 JSON, creating parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dumps_json(obj), encoding="utf-8")


def read_json(path: str | Path) -> dict[str, Any]:
    """Read a JSON document whose top level must be an object.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON
        ValueError: If the top level is not an object
    """
    data: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data
