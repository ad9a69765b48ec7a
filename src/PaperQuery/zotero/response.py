"""Response envelopes carrying Zotero's pagination and version headers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class PagedResponse:
    """Array response plus ``Total-Results`` and ``Last-Modified-Version``."""

    items: list[dict[str, Any]] = field(default_factory=list)
    total_results: int | None = None
    last_modified_version: int | None = None


@dataclass(frozen=True, slots=True)
class VersionedResponse:
    """Single-object response plus ``Last-Modified-Version``."""

    data: dict[str, Any]
    last_modified_version: int | None = None


def header_int(headers: Mapping[str, str], name: str) -> int | None:
    """Parse an integer response header, None when absent or malformed."""
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None
