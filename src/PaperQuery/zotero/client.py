"""Zotero Web API v3 client (read endpoints)."""

from __future__ import annotations

from typing import Any, Sequence

import requests

from PaperQuery import __version__
from PaperQuery.utils.http import request_with_retry
from PaperQuery.utils.log import log
from PaperQuery.zotero.errors import ZoteroApiError, ZoteroHttpError, ZoteroJsonError
from PaperQuery.zotero.params import CollectionListParams, ItemListParams, TagListParams
from PaperQuery.zotero.response import PagedResponse, VersionedResponse, header_int

DEFAULT_BASE_URL = "https://api.zotero.org"
LOCAL_BASE_URL = "http://127.0.0.1:23119/api"
DEFAULT_TIMEOUT = 30.0
LOCAL_CHECK_TIMEOUT = 0.5
API_VERSION = "3"


class ZoteroClient:
    """Low-level HTTP client for one Zotero user library."""

    def __init__(
        self,
        user_id: str,
        api_key: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            user_id: Numeric Zotero user ID.
            api_key: API key; the local desktop API does not need one.
            base_url: Web API root or the local API root.
            timeout: Request timeout in seconds.
            session: Pre-built session, mostly for tests.
        """
        self.user_id = user_id
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    @property
    def _prefix(self) -> str:
        return f"/users/{self.user_id}"

    # Items

    def list_items(self, params: ItemListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/items", params or ItemListParams())

    def list_top_items(self, params: ItemListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/items/top", params or ItemListParams())

    def list_trash_items(self, params: ItemListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/items/trash", params or ItemListParams())

    def get_item(self, key: str) -> dict[str, Any]:
        return self._get_object(f"{self._prefix}/items/{key}").data

    def list_item_children(self, key: str, params: ItemListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/items/{key}/children", params or ItemListParams())

    def list_collection_items(self, collection_key: str, params: ItemListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/collections/{collection_key}/items", params or ItemListParams())

    def list_collection_top_items(
        self, collection_key: str, params: ItemListParams | None = None
    ) -> PagedResponse:
        return self._get_array(
            f"{self._prefix}/collections/{collection_key}/items/top", params or ItemListParams()
        )

    # Collections

    def list_collections(self, params: CollectionListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/collections", params or CollectionListParams())

    def list_top_collections(self, params: CollectionListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/collections/top", params or CollectionListParams())

    def get_collection(self, key: str) -> dict[str, Any]:
        return self._get_object(f"{self._prefix}/collections/{key}").data

    def list_subcollections(self, key: str, params: CollectionListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/collections/{key}/collections", params or CollectionListParams())

    # Saved searches, tags, groups

    def list_searches(self) -> PagedResponse:
        return self._get_array(f"{self._prefix}/searches")

    def get_search(self, key: str) -> dict[str, Any]:
        return self._get_object(f"{self._prefix}/searches/{key}").data

    def list_tags(self, params: TagListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/tags", params or TagListParams())

    def list_item_tags(self, key: str, params: TagListParams | None = None) -> PagedResponse:
        return self._get_array(f"{self._prefix}/items/{key}/tags", params or TagListParams())

    def list_groups(self) -> PagedResponse:
        return self._get_array(f"{self._prefix}/groups")

    def get_item_fulltext(self, key: str) -> VersionedResponse:
        """Indexed full text of an attachment item; 404 when not indexed."""
        return self._get_object(f"{self._prefix}/items/{key}/fulltext")

    def download_item_file(self, key: str) -> bytes:
        """Stored file of an attachment item.

        The web API answers with a redirect to file storage, which the
        session follows.
        """
        return self._get(f"{self._prefix}/items/{key}/file", ()).content

    # Transport

    def _get_array(self, path: str, params: Any = None) -> PagedResponse:
        query = params.to_query() if params is not None else []
        response = self._get(path, query)
        payload = _decode(response, path)
        if not isinstance(payload, list):
            raise ZoteroJsonError(f"Expected JSON array from {path}")
        return PagedResponse(
            items=[item for item in payload if isinstance(item, dict)],
            total_results=header_int(response.headers, "Total-Results"),
            last_modified_version=header_int(response.headers, "Last-Modified-Version"),
        )

    def _get_object(self, path: str, query: Sequence[tuple[str, str]] = ()) -> VersionedResponse:
        response = self._get(path, query)
        payload = _decode(response, path)
        if not isinstance(payload, dict):
            raise ZoteroJsonError(f"Expected JSON object from {path}")
        return VersionedResponse(
            data=payload,
            last_modified_version=header_int(response.headers, "Last-Modified-Version"),
        )

    def _get(self, path: str, query: Sequence[tuple[str, str]]) -> requests.Response:
        """GET one path under the library.

        Raises:
            ZoteroApiError: On a non-success status.
            ZoteroHttpError: On transport failure.
        """
        url = f"{self.base_url}{path}"
        headers = {
            "Zotero-API-Version": API_VERSION,
            "User-Agent": f"paper-query/{__version__}",
        }
        if self.api_key:
            headers["Zotero-API-Key"] = self.api_key
        try:
            response = request_with_retry(
                self._session,
                "GET",
                url,
                params=list(query),
                headers=headers,
                timeout=self.timeout,
                label="Zotero",
            )
        except requests.RequestException as error:
            raise ZoteroHttpError(f"GET {url} failed: {error}") from error
        if not response.ok:
            raise ZoteroApiError(response.status_code, response.text)
        return response


def _decode(response: requests.Response, path: str) -> Any:
    try:
        return response.json()
    except ValueError as error:
        raise ZoteroJsonError(f"Invalid JSON from {path}: {error}") from error


def local_api_available(user_id: str, *, base_url: str = LOCAL_BASE_URL, timeout: float = LOCAL_CHECK_TIMEOUT) -> bool:
    """Return True if the Zotero desktop local API answers for ``user_id``."""
    url = f"{base_url.rstrip('/')}/users/{user_id}/items"
    try:
        response = requests.get(
            url,
            params={"limit": "0"},
            headers={"Zotero-API-Version": API_VERSION},
            timeout=timeout,
        )
    except requests.RequestException as error:
        log.debug("Zotero local API unavailable url=%s error=%s", url, error)
        return False
    return response.ok
