"""Typed wrappers around OpenAlex response envelopes.

Entity records themselves stay plain dicts; only the envelopes that the
rest of the code branches on (pagination meta, group-by buckets,
autocomplete hits) are parsed into dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from PaperQuery.openalex.errors import OpenAlexJsonError


@dataclass(frozen=True, slots=True)
class ListMeta:
    """Pagination metadata of a list response."""

    count: int
    db_response_time_ms: int | None = None
    page: int | None = None
    per_page: int | None = None
    next_cursor: str | None = None
    groups_count: int | None = None


@dataclass(frozen=True, slots=True)
class GroupByResult:
    """One bucket of a ``group_by`` aggregation."""

    key: str
    key_display_name: str | None
    count: int


@dataclass(frozen=True, slots=True)
class ListResponse:
    """Envelope returned by every list endpoint."""

    meta: ListMeta
    results: list[dict[str, Any]] = field(default_factory=list)
    group_by: list[GroupByResult] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class AutocompleteResult:
    """One type-ahead hit."""

    id: str
    display_name: str
    short_id: str | None = None
    hint: str | None = None
    cited_by_count: int | None = None
    works_count: int | None = None
    entity_type: str | None = None
    external_id: str | None = None


@dataclass(frozen=True, slots=True)
class AutocompleteResponse:
    count: int
    results: list[AutocompleteResult] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FindWorksResult:
    """Semantic search hit: a similarity score plus the raw work record."""

    score: float
    work: dict[str, Any]


@dataclass(frozen=True, slots=True)
class FindWorksResponse:
    meta: dict[str, Any] | None
    results: list[FindWorksResult] = field(default_factory=list)


def _expect_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise OpenAlexJsonError(f"Expected JSON object for {what}, got {type(payload).__name__}")
    return payload


def _expect_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise OpenAlexJsonError(f"Expected JSON array for {what}, got {type(value).__name__}")
    return value


def _opt_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def parse_list_response(payload: Any) -> ListResponse:
    """Parse a list endpoint body.

    Raises:
        OpenAlexJsonError: If the envelope is missing ``meta`` or ``results``.
    """
    body = _expect_mapping(payload, "list response")
    if "meta" not in body or "results" not in body:
        raise OpenAlexJsonError("List response is missing 'meta' or 'results'")
    raw_meta = _expect_mapping(body["meta"], "meta")
    meta = ListMeta(
        count=_opt_int(raw_meta.get("count")) or 0,
        db_response_time_ms=_opt_int(raw_meta.get("db_response_time_ms")),
        page=_opt_int(raw_meta.get("page")),
        per_page=_opt_int(raw_meta.get("per_page")),
        next_cursor=raw_meta.get("next_cursor"),
        groups_count=_opt_int(raw_meta.get("groups_count")),
    )
    results = [item for item in _expect_list(body["results"], "results") if isinstance(item, dict)]
    groups = [
        GroupByResult(
            key=str(item.get("key", "")),
            key_display_name=item.get("key_display_name"),
            count=_opt_int(item.get("count")) or 0,
        )
        for item in _expect_list(body.get("group_by"), "group_by")
        if isinstance(item, dict)
    ]
    return ListResponse(meta=meta, results=results, group_by=groups)


def parse_autocomplete_response(payload: Any) -> AutocompleteResponse:
    """Parse an ``/autocomplete/<entity>`` body."""
    body = _expect_mapping(payload, "autocomplete response")
    raw_meta = body.get("meta") if isinstance(body.get("meta"), Mapping) else {}
    results = [
        AutocompleteResult(
            id=str(item.get("id", "")),
            display_name=str(item.get("display_name", "")),
            short_id=item.get("short_id"),
            hint=item.get("hint"),
            cited_by_count=_opt_int(item.get("cited_by_count")),
            works_count=_opt_int(item.get("works_count")),
            entity_type=item.get("entity_type"),
            external_id=item.get("external_id"),
        )
        for item in _expect_list(body.get("results"), "results")
        if isinstance(item, dict)
    ]
    return AutocompleteResponse(count=_opt_int(raw_meta.get("count")) or len(results), results=results)


def parse_find_works_response(payload: Any) -> FindWorksResponse:
    """Parse a ``/find/works`` body; each hit keeps its score beside the work."""
    body = _expect_mapping(payload, "find works response")
    results: list[FindWorksResult] = []
    for item in _expect_list(body.get("results"), "results"):
        if not isinstance(item, dict):
            continue
        work = dict(item)
        score = work.pop("score", 0.0)
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            score = 0.0
        results.append(FindWorksResult(score=float(score), work=work))
    meta = body.get("meta")
    return FindWorksResponse(meta=dict(meta) if isinstance(meta, Mapping) else None, results=results)
