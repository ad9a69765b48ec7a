"""JSON output renderer.

Converts summaries, response envelopes and raw records into JSON text for
``--json`` output and MCP tool results.
"""

from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any


def to_jsonable(obj: Any) -> Any:
    """Convert dataclasses (recursively), enums and tuples into JSON types."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, dict):
        return {str(key): to_jsonable(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(item) for item in obj]
    if isinstance(obj, Enum):
        return obj.value
    return obj


def render_json(obj: Any, *, indent: int | None = 2) -> str:
    """Render any result object as JSON text.

    Args:
        obj: Dataclass, dict, list or scalar.
        indent: Indentation width; None for compact output.

    Returns:
        JSON string with non-ASCII characters preserved.
    """
    return json.dumps(to_jsonable(obj), ensure_ascii=False, indent=indent)
