"""Zotero Web API client package."""

from __future__ import annotations

from PaperQuery.zotero.client import ZoteroClient, local_api_available
from PaperQuery.zotero.errors import ZoteroApiError, ZoteroError, ZoteroHttpError, ZoteroJsonError
from PaperQuery.zotero.params import CollectionListParams, ItemListParams, TagListParams
from PaperQuery.zotero.response import PagedResponse, VersionedResponse

__all__ = [
    "ZoteroClient",
    "local_api_available",
    "ZoteroError",
    "ZoteroApiError",
    "ZoteroHttpError",
    "ZoteroJsonError",
    "ItemListParams",
    "CollectionListParams",
    "TagListParams",
    "PagedResponse",
    "VersionedResponse",
]
