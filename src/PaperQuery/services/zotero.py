"""Zotero application service: name-or-key lookups and slim records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from PaperQuery.zotero.client import ZoteroClient
from PaperQuery.zotero.errors import ZoteroApiError
from PaperQuery.zotero.params import CollectionListParams, ItemListParams, TagListParams
from PaperQuery.zotero.response import PagedResponse

_KEY_RE = re.compile(r"^[A-Z0-9]{8}$")
_NAME_LOOKUP_LIMIT = 100


def looks_like_zotero_key(value: str) -> bool:
    """Zotero object keys are exactly 8 uppercase letters or digits."""
    return bool(_KEY_RE.match(value))


def resolve_item_key(client: ZoteroClient, value: str) -> str:
    """Return ``value`` if it is a key, else the key of the best top-level match.

    Raises:
        ZoteroApiError: 404 when the quick search finds nothing.
    """
    if looks_like_zotero_key(value):
        return value
    response = client.list_top_items(ItemListParams(q=value, limit=1))
    if not response.items:
        raise ZoteroApiError(404, f"No item found matching: {value}")
    return str(response.items[0]["key"])


def _first_named(items: list[dict[str, Any]], value: str) -> str | None:
    wanted = value.casefold()
    for item in items:
        name = str((item.get("data") or {}).get("name") or "")
        if wanted in name.casefold():
            return str(item["key"])
    return None


def resolve_collection_key(client: ZoteroClient, value: str) -> str:
    """Return ``value`` if it is a key, else the first collection whose name contains it.

    Raises:
        ZoteroApiError: 404 when no collection name matches.
    """
    if looks_like_zotero_key(value):
        return value
    key = _first_named(client.list_collections(CollectionListParams(limit=_NAME_LOOKUP_LIMIT)).items, value)
    if key is None:
        raise ZoteroApiError(404, f"No collection found matching: {value}")
    return key


def resolve_search_key(client: ZoteroClient, value: str) -> str:
    """Return ``value`` if it is a key, else the first saved search whose name contains it.

    Raises:
        ZoteroApiError: 404 when no saved search name matches.
    """
    if looks_like_zotero_key(value):
        return value
    key = _first_named(client.list_searches().items, value)
    if key is None:
        raise ZoteroApiError(404, f"No saved search found matching: {value}")
    return key


@dataclass(frozen=True, slots=True)
class ItemSummary:
    key: str
    item_type: str | None
    title: str | None
    creators: list[str]
    date: str | None
    publication_title: str | None
    doi: str | None
    url: str | None
    tags: list[str]
    collections: list[str]
    num_children: int | None
    parent_item: str | None


@dataclass(frozen=True, slots=True)
class CollectionSummary:
    key: str
    name: str | None
    parent_collection: str | None
    num_items: int | None
    num_collections: int | None


@dataclass(frozen=True, slots=True)
class SearchSummary:
    key: str
    name: str | None
    conditions: list[str]


@dataclass(frozen=True, slots=True)
class TagSummary:
    tag: str
    type: int | None
    num_items: int | None


@dataclass(frozen=True, slots=True)
class GroupSummary:
    id: int | None
    name: str | None
    type: str | None
    description: str | None


@dataclass(frozen=True, slots=True)
class PagedSummary:
    """Slim page of records with the library-wide result count."""

    total: int | None
    items: list[Any]


def _creator_name(creator: Mapping[str, Any]) -> str:
    if creator.get("name"):
        return str(creator["name"])
    last = str(creator.get("lastName") or "").strip()
    first = str(creator.get("firstName") or "").strip()
    return f"{last}, {first}" if last and first else last or first


def summarize_item(item: Mapping[str, Any]) -> ItemSummary:
    data = item.get("data") or {}
    meta = item.get("meta") or {}
    return ItemSummary(
        key=str(item.get("key") or data.get("key") or ""),
        item_type=data.get("itemType"),
        title=data.get("title") or data.get("filename"),
        creators=[_creator_name(c) for c in data.get("creators") or [] if isinstance(c, Mapping)],
        date=data.get("date") or None,
        publication_title=data.get("publicationTitle") or None,
        doi=data.get("DOI") or None,
        url=data.get("url") or None,
        tags=[str(t.get("tag")) for t in data.get("tags") or [] if isinstance(t, Mapping) and t.get("tag")],
        collections=[str(c) for c in data.get("collections") or []],
        num_children=meta.get("numChildren"),
        parent_item=data.get("parentItem") or None,
    )


def summarize_collection(collection: Mapping[str, Any]) -> CollectionSummary:
    data = collection.get("data") or {}
    meta = collection.get("meta") or {}
    parent = data.get("parentCollection")
    return CollectionSummary(
        key=str(collection.get("key") or data.get("key") or ""),
        name=data.get("name"),
        parent_collection=parent if isinstance(parent, str) else None,
        num_items=meta.get("numItems"),
        num_collections=meta.get("numCollections"),
    )


def summarize_search(search: Mapping[str, Any]) -> SearchSummary:
    data = search.get("data") or {}
    conditions = [
        f"{c.get('condition')} {c.get('operator')} {c.get('value')}".strip()
        for c in data.get("conditions") or []
        if isinstance(c, Mapping)
    ]
    return SearchSummary(key=str(search.get("key") or ""), name=data.get("name"), conditions=conditions)


def summarize_tag(tag: Mapping[str, Any]) -> TagSummary:
    meta = tag.get("meta") or {}
    return TagSummary(tag=str(tag.get("tag") or ""), type=meta.get("type"), num_items=meta.get("numItems"))


def summarize_group(group: Mapping[str, Any]) -> GroupSummary:
    data = group.get("data") or {}
    return GroupSummary(
        id=group.get("id"),
        name=data.get("name"),
        type=data.get("type"),
        description=data.get("description") or None,
    )


def _paged(response: PagedResponse, summarizer: Any) -> PagedSummary:
    return PagedSummary(total=response.total_results, items=[summarizer(item) for item in response.items])


@dataclass(slots=True)
class ZoteroService:
    """Zotero operations exposed by both the CLI and the MCP server."""

    client: ZoteroClient

    def list_items(
        self,
        params: ItemListParams,
        *,
        top: bool = False,
        trash: bool = False,
        collection: str | None = None,
    ) -> PagedSummary:
        """List items, optionally only top-level, trashed, or in one collection.

        ``collection`` accepts a key or part of a collection name.
        """
        if trash and collection:
            raise ValueError("--trash cannot be combined with a collection")
        if collection:
            key = resolve_collection_key(self.client, collection)
            if top:
                response = self.client.list_collection_top_items(key, params)
            else:
                response = self.client.list_collection_items(key, params)
        elif trash:
            response = self.client.list_trash_items(params)
        elif top:
            response = self.client.list_top_items(params)
        else:
            response = self.client.list_items(params)
        return _paged(response, summarize_item)

    def get_item(self, value: str) -> dict[str, Any]:
        """Full item record by key or title search."""
        return self.client.get_item(resolve_item_key(self.client, value))

    def item_children(self, value: str) -> PagedSummary:
        """Attachments and notes of an item."""
        return _paged(self.client.list_item_children(resolve_item_key(self.client, value)), summarize_item)

    def item_fulltext(self, value: str) -> dict[str, Any]:
        return self.client.get_item_fulltext(resolve_item_key(self.client, value)).data

    def list_collections(self, params: CollectionListParams, *, top: bool = False) -> PagedSummary:
        if top:
            response = self.client.list_top_collections(params)
        else:
            response = self.client.list_collections(params)
        return _paged(response, summarize_collection)

    def get_collection(self, value: str) -> dict[str, Any]:
        return self.client.get_collection(resolve_collection_key(self.client, value))

    def list_searches(self) -> PagedSummary:
        return _paged(self.client.list_searches(), summarize_search)

    def get_search(self, value: str) -> dict[str, Any]:
        return self.client.get_search(resolve_search_key(self.client, value))

    def list_tags(self, params: TagListParams, *, item: str | None = None) -> PagedSummary:
        """Library tags, or the tags of one item when ``item`` is given."""
        if item:
            response = self.client.list_item_tags(resolve_item_key(self.client, item), params)
        else:
            response = self.client.list_tags(params)
        return _paged(response, summarize_tag)

    def list_groups(self) -> PagedSummary:
        return _paged(self.client.list_groups(), summarize_group)
