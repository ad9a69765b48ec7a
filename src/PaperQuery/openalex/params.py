"""Query parameter records for OpenAlex endpoints.

Each record renders itself as an ordered list of ``(key, value)`` pairs;
unset fields are omitted. The order is stable so that request cache keys
are stable too.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ListParams:
    """Parameters shared by every ``/<entity>`` list endpoint.

    Attributes:
        filter: Native filter expression, ``key:value`` pairs joined by commas.
        search: Full-text search string.
        sort: Sort expression, e.g. ``cited_by_count:desc``.
        per_page: Results per page (1-200); sent as ``per-page``.
        page: Page number for offset pagination.
        cursor: Cursor for deep pagination (``*`` starts a walk).
        sample: Random sample size.
        seed: Seed for reproducible samples.
        select: Comma-separated field list.
        group_by: Field to aggregate results by.
    """

    filter: str | None = None
    search: str | None = None
    sort: str | None = None
    per_page: int | None = None
    page: int | None = None
    cursor: str | None = None
    sample: int | None = None
    seed: int | None = None
    select: str | None = None
    group_by: str | None = None

    def to_query(self) -> list[tuple[str, str]]:
        pairs = (
            ("filter", self.filter),
            ("search", self.search),
            ("sort", self.sort),
            ("per-page", self.per_page),
            ("page", self.page),
            ("cursor", self.cursor),
            ("sample", self.sample),
            ("seed", self.seed),
            ("select", self.select),
            ("group_by", self.group_by),
        )
        return [(key, str(value)) for key, value in pairs if value is not None and value != ""]


@dataclass(frozen=True, slots=True)
class GetParams:
    """Parameters for single-entity lookups."""

    select: str | None = None

    def to_query(self) -> list[tuple[str, str]]:
        return [("select", self.select)] if self.select else []


@dataclass(frozen=True, slots=True)
class FindWorksParams:
    """Parameters for semantic work search (``/find/works``).

    Attributes:
        query: Natural-language query text.
        count: Number of results (1-100).
        filter: Native filter expression applied to matches.
    """

    query: str
    count: int | None = None
    filter: str | None = None

    def to_query(self) -> list[tuple[str, str]]:
        return [("query", self.query), *self.to_post_query()]

    def to_post_query(self) -> list[tuple[str, str]]:
        """Query pairs for the POST form, where the text goes in the body."""
        pairs: list[tuple[str, str]] = []
        if self.count is not None:
            pairs.append(("count", str(self.count)))
        if self.filter:
            pairs.append(("filter", self.filter))
        return pairs
