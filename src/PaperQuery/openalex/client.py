"""OpenAlex REST API client."""

from __future__ import annotations

import json
from typing import Any, Sequence

import requests

from PaperQuery import __version__
from PaperQuery.openalex.errors import OpenAlexApiError, OpenAlexHttpError, OpenAlexJsonError
from PaperQuery.openalex.params import FindWorksParams, GetParams, ListParams
from PaperQuery.openalex.response import (
    AutocompleteResponse,
    FindWorksResponse,
    ListResponse,
    parse_autocomplete_response,
    parse_find_works_response,
    parse_list_response,
)
from PaperQuery.storage.cache import DiskCache
from PaperQuery.utils.http import request_with_retry

DEFAULT_BASE_URL = "https://api.openalex.org"
DEFAULT_CONTENT_URL = "https://content.openalex.org"
DEFAULT_TIMEOUT = 30.0
# Longer semantic queries go in a POST body to stay under URL length limits.
MAX_GET_QUERY_LENGTH = 2048

HEADERS = {
    "User-Agent": f"paper-query/{__version__}",
    "Accept": "application/json",
}


class OpenAlexClient:
    """Low-level HTTP client for the OpenAlex REST API.

    Thread-safe for concurrent reads: filter resolution issues lookups from a
    worker pool through one shared session.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str | None = None,
        mailto: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        cache: DiskCache | None = None,
        session: requests.Session | None = None,
        content_url: str = DEFAULT_CONTENT_URL,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            base_url: API root, without trailing slash.
            api_key: Optional API key; required for ``find_works``.
            mailto: Optional contact address for the polite pool.
            timeout: Request timeout in seconds.
            cache: Optional response cache.
            session: Pre-built session, mostly for tests.
            content_url: Root of the cached-PDF content API.
        """
        self.base_url = base_url.rstrip("/")
        self.content_url = content_url.rstrip("/")
        self.api_key = api_key
        self.mailto = mailto
        self.timeout = timeout
        self.cache = cache
        self._session = session or requests.Session()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def list_entities(self, entity: str, params: ListParams) -> ListResponse:
        """List one entity collection, e.g. ``works`` or ``authors``.

        Args:
            entity: Collection path without slashes.
            params: Filter, search, sort and paging parameters.

        Returns:
            Parsed list envelope with raw result dicts.
        """
        return parse_list_response(self._get_json(f"/{entity}", params.to_query()))

    def get_entity(self, entity: str, entity_id: str, params: GetParams | None = None) -> dict[str, Any]:
        """Fetch one record by ID (OpenAlex ID, DOI, ORCID, ROR, ...)."""
        payload = self._get_json(f"/{entity}/{entity_id}", (params or GetParams()).to_query())
        if not isinstance(payload, dict):
            raise OpenAlexJsonError(f"Expected JSON object for {entity}/{entity_id}")
        return payload

    def autocomplete(self, entity: str, q: str) -> AutocompleteResponse:
        """Type-ahead search over one collection."""
        return parse_autocomplete_response(self._get_json(f"/autocomplete/{entity}", [("q", q)]))

    def find_works(self, params: FindWorksParams) -> FindWorksResponse:
        """Semantic work search. Requires an API key."""
        if len(params.query) > MAX_GET_QUERY_LENGTH:
            payload = self._request_json(
                "POST",
                "/find/works",
                params.to_post_query(),
                body=json.dumps({"query": params.query}),
            )
        else:
            payload = self._get_json("/find/works", params.to_query())
        return parse_find_works_response(payload)

    def get_work_pdf(self, work_id: str) -> bytes:
        """Download the PDF OpenAlex stores for a work. Requires an API key.

        Args:
            work_id: Short work ID, e.g. ``W2741809807``.

        Raises:
            ValueError: If no API key is configured.
            OpenAlexApiError: On a non-success status (404 when no PDF is held).
        """
        if not self.api_key:
            raise ValueError("the OpenAlex content API requires an API key (set OPENALEX_KEY)")
        url = f"{self.content_url}/works/{work_id}.pdf"
        response = self._send("GET", url, self._with_credentials([]), None, accept="application/pdf")
        if not response.ok:
            raise OpenAlexApiError(response.status_code, response.reason or "PDF download failed")
        return response.content

    def _get_json(self, path: str, query: Sequence[tuple[str, str]]) -> Any:
        return self._request_json("GET", path, query)

    def _request_json(
        self,
        method: str,
        path: str,
        query: Sequence[tuple[str, str]],
        *,
        body: str | None = None,
    ) -> Any:
        """Issue one request through the cache and decode the JSON body.

        Raises:
            OpenAlexApiError: On a non-success status.
            OpenAlexHttpError: On transport failure.
            OpenAlexJsonError: If the body is not valid JSON.
        """
        url = f"{self.base_url}{path}"
        cached = self.cache.get(url, query, body) if self.cache is not None else None
        if cached is not None:
            return json.loads(cached)
        response = self._send(method, url, self._with_credentials(query), body)
        if not response.ok:
            raise OpenAlexApiError(response.status_code, response.text)
        try:
            payload = json.loads(response.text)
        except ValueError as error:
            raise OpenAlexJsonError(f"Invalid JSON from {path}: {error}") from error
        if self.cache is not None:
            self.cache.set(url, query, body, response.text)
        return payload

    def _with_credentials(self, query: Sequence[tuple[str, str]]) -> list[tuple[str, str]]:
        pairs = list(query)
        if self.api_key:
            pairs.append(("api_key", self.api_key))
        if self.mailto:
            pairs.append(("mailto", self.mailto))
        return pairs

    def _send(
        self,
        method: str,
        url: str,
        query: list[tuple[str, str]],
        body: str | None,
        *,
        accept: str | None = None,
    ) -> requests.Response:
        headers = dict(HEADERS)
        if accept is not None:
            headers["Accept"] = accept
        if body is not None:
            headers["Content-Type"] = "application/json"
        try:
            return request_with_retry(
                self._session,
                method,
                url,
                params=query,
                data=body,
                headers=headers,
                timeout=self.timeout,
                label="OpenAlex",
            )
        except requests.RequestException as error:
            raise OpenAlexHttpError(f"{method} {url} failed: {error}") from error
