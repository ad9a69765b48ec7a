"""Query parameter records for Zotero Web API v3 endpoints."""

from __future__ import annotations

from dataclasses import dataclass


def _pairs(items: tuple[tuple[str, object], ...]) -> list[tuple[str, str]]:
    out: list[tuple[str, str]] = []
    for key, value in items:
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "1" if value else "0"
        out.append((key, str(value)))
    return out


@dataclass(frozen=True, slots=True)
class ItemListParams:
    """Search and paging parameters for item list endpoints.

    Attributes:
        q: Quick search text.
        qmode: ``titleCreatorYear`` (default) or ``everything``.
        tag: Tag filter; ``a || b`` for OR, ``-a`` to exclude.
        item_type: Item type filter, e.g. ``journalArticle`` or ``-attachment``.
        item_key: Comma-separated item keys (max 50).
        since: Only items modified after this library version.
        sort: Sort field, e.g. ``dateModified`` or ``title``.
        direction: ``asc`` or ``desc``.
        limit: Page size (1-100).
        start: Offset of the first result.
        include_trashed: Include trashed items.
    """

    q: str | None = None
    qmode: str | None = None
    tag: str | None = None
    item_type: str | None = None
    item_key: str | None = None
    since: int | None = None
    sort: str | None = None
    direction: str | None = None
    limit: int | None = None
    start: int | None = None
    include_trashed: bool | None = None

    def to_query(self) -> list[tuple[str, str]]:
        return _pairs(
            (
                ("q", self.q),
                ("qmode", self.qmode),
                ("tag", self.tag),
                ("itemType", self.item_type),
                ("itemKey", self.item_key),
                ("since", self.since),
                ("sort", self.sort),
                ("direction", self.direction),
                ("limit", self.limit),
                ("start", self.start),
                ("includeTrashed", self.include_trashed),
            )
        )


@dataclass(frozen=True, slots=True)
class CollectionListParams:
    sort: str | None = None
    direction: str | None = None
    limit: int | None = None
    start: int | None = None

    def to_query(self) -> list[tuple[str, str]]:
        return _pairs(
            (
                ("sort", self.sort),
                ("direction", self.direction),
                ("limit", self.limit),
                ("start", self.start),
            )
        )


@dataclass(frozen=True, slots=True)
class TagListParams:
    q: str | None = None
    qmode: str | None = None
    limit: int | None = None
    start: int | None = None

    def to_query(self) -> list[tuple[str, str]]:
        return _pairs(
            (
                ("q", self.q),
                ("qmode", self.qmode),
                ("limit", self.limit),
                ("start", self.start),
            )
        )
