"""Output renderers for command results."""

from __future__ import annotations

from PaperQuery.renderers.json import render_json, to_jsonable

__all__ = ["render_json", "to_jsonable"]
