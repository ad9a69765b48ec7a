"""Tool implementations behind the MCP server.

Every method returns a string: JSON on success, ``"Error: <message>"`` on
failure. Errors never escape as exceptions, so the MCP client sees a normal
tool result it can read and react to.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Mapping

from PaperQuery.config import AppConfig
from PaperQuery.openalex.params import ListParams
from PaperQuery.renderers.json import render_json
from PaperQuery.services import (
    OpenAlexService,
    WorkTextService,
    ZoteroService,
    create_openalex_service,
    create_work_text_service,
    create_zotero_service,
)
from PaperQuery.utils.log import log
from PaperQuery.zotero.params import CollectionListParams, ItemListParams, TagListParams

DEFAULT_PER_PAGE = 10


class PaperTools:
    """Lazily builds the services and turns every call into a string result."""

    def __init__(
        self,
        config: AppConfig,
        *,
        openalex: OpenAlexService | None = None,
        zotero: ZoteroService | None = None,
        text: WorkTextService | None = None,
    ) -> None:
        self.config = config
        self._openalex = openalex
        self._zotero = zotero
        self._text = text
        self._lock = threading.Lock()

    @property
    def openalex(self) -> OpenAlexService:
        with self._lock:
            if self._openalex is None:
                self._openalex = create_openalex_service(self.config)
            return self._openalex

    @property
    def zotero(self) -> ZoteroService:
        """Zotero service; raises ValueError when credentials are missing."""
        with self._lock:
            if self._zotero is None:
                self._zotero = create_zotero_service(self.config)
            return self._zotero

    @property
    def text(self) -> WorkTextService:
        """Work text service sharing this instance's OpenAlex and Zotero sessions."""
        openalex = self.openalex
        with self._lock:
            if self._text is None:
                self._text = create_work_text_service(self.config, openalex=openalex, zotero=self._zotero)
            return self._text

    def _call(self, action: str, fn: Callable[[], Any]) -> str:
        try:
            return render_json(fn())
        except Exception as e:  # noqa: BLE001 - tool boundary
            log.warning("%s failed: %s", action, e)
            return f"Error: {e}"

    # OpenAlex

    def entity_list(
        self,
        entity: str,
        *,
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int | None = DEFAULT_PER_PAGE,
        page: int | None = None,
        cursor: str | None = None,
        sample: int | None = None,
        seed: int | None = None,
        aliases: Mapping[str, Any] | None = None,
    ) -> str:
        params = ListParams(
            filter=filter,
            search=search,
            sort=sort,
            per_page=per_page,
            page=page,
            cursor=cursor,
            sample=sample,
            seed=seed,
        )
        return self._call(
            f"{entity}_list",
            lambda: self.openalex.list_entities(entity, params, aliases or {}),
        )

    def entity_get(self, entity: str, id: str, select: str | None = None) -> str:
        return self._call(f"{entity}_get", lambda: self.openalex.get_entity(entity, id, select=select))

    def entity_autocomplete(self, entity: str, q: str) -> str:
        return self._call(f"{entity}_autocomplete", lambda: self.openalex.autocomplete(entity, q))

    def work_find(self, query: str, count: int | None = None, filter: str | None = None) -> str:
        return self._call("work_find", lambda: self.openalex.find_works(query, count=count, filter=filter))

    def work_text(self, id: str) -> str:
        return self._call("work_text", lambda: self.text.work_text(id))

    # Zotero

    def zotero_item_list(
        self,
        search: str | None = None,
        everything: bool = False,
        tag: str | None = None,
        item_type: str | None = None,
        collection: str | None = None,
        top: bool = False,
        sort: str | None = None,
        direction: str | None = None,
        limit: int = 25,
        start: int | None = None,
    ) -> str:
        params = ItemListParams(
            q=search,
            qmode="everything" if everything else None,
            tag=tag,
            item_type=item_type,
            sort=sort,
            direction=direction,
            limit=limit,
            start=start,
        )
        return self._call(
            "zotero_item_list",
            lambda: self.zotero.list_items(params, top=top, collection=collection),
        )

    def zotero_item_get(self, key: str) -> str:
        return self._call("zotero_item_get", lambda: self.zotero.get_item(key))

    def zotero_item_children(self, key: str) -> str:
        return self._call("zotero_item_children", lambda: self.zotero.item_children(key))

    def zotero_item_fulltext(self, key: str) -> str:
        return self._call("zotero_item_fulltext", lambda: self.zotero.item_fulltext(key))

    def zotero_collection_list(self, top: bool = False, limit: int = 100, start: int | None = None) -> str:
        params = CollectionListParams(limit=limit, start=start)
        return self._call("zotero_collection_list", lambda: self.zotero.list_collections(params, top=top))

    def zotero_collection_items(self, collection: str, top: bool = False, limit: int = 25) -> str:
        params = ItemListParams(limit=limit)
        return self._call(
            "zotero_collection_items",
            lambda: self.zotero.list_items(params, top=top, collection=collection),
        )

    def zotero_search_list(self) -> str:
        return self._call("zotero_search_list", lambda: self.zotero.list_searches())

    def zotero_tag_list(self, search: str | None = None, item: str | None = None, limit: int = 50) -> str:
        params = TagListParams(q=search, limit=limit)
        return self._call("zotero_tag_list", lambda: self.zotero.list_tags(params, item=item))
