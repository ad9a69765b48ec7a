"""OpenAlex REST API client package."""

from __future__ import annotations

from PaperQuery.openalex.client import OpenAlexClient
from PaperQuery.openalex.errors import (
    OpenAlexApiError,
    OpenAlexError,
    OpenAlexHttpError,
    OpenAlexJsonError,
)
from PaperQuery.openalex.params import FindWorksParams, GetParams, ListParams
from PaperQuery.openalex.response import (
    AutocompleteResponse,
    AutocompleteResult,
    FindWorksResponse,
    FindWorksResult,
    GroupByResult,
    ListMeta,
    ListResponse,
)

__all__ = [
    "OpenAlexClient",
    "OpenAlexError",
    "OpenAlexApiError",
    "OpenAlexHttpError",
    "OpenAlexJsonError",
    "ListParams",
    "GetParams",
    "FindWorksParams",
    "ListMeta",
    "GroupByResult",
    "ListResponse",
    "AutocompleteResult",
    "AutocompleteResponse",
    "FindWorksResult",
    "FindWorksResponse",
]
