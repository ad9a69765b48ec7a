"""OpenAlex application service: alias-aware listing and smart lookups."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from PaperQuery.core.entities import EntityKind, get_entity_kind
from PaperQuery.core.filter import (
    OPENALEX_URL_PREFIX,
    is_openalex_id,
    resolve_entity_id,
    resolve_filter,
)
from PaperQuery.core.summary import SlimListResponse, summarize_list
from PaperQuery.openalex.client import OpenAlexClient
from PaperQuery.openalex.params import FindWorksParams, GetParams, ListParams
from PaperQuery.openalex.response import AutocompleteResponse, FindWorksResponse
from PaperQuery.utils.log import log

_ISSN_RE = re.compile(r"^[0-9Xx]{4}-[0-9Xx]{4}$")
_EXTERNAL_ID_PREFIXES = (
    "https://doi.org/",
    "doi:",
    "pmid:",
    "pmcid:",
    "https://orcid.org/",
    "https://ror.org/",
)


def looks_like_identifier(value: str, entity: EntityKind) -> bool:
    """Return True if ``value`` can be passed to a get endpoint as-is.

    Besides OpenAlex IDs this accepts the external IDs OpenAlex resolves
    itself: DOIs, PubMed IDs, ORCIDs, ROR IDs and ISSNs.
    """
    if is_openalex_id(value, entity):
        return True
    if value.startswith(_EXTERNAL_ID_PREFIXES):
        return True
    if value.startswith("10.") and "/" in value:
        return True
    return bool(_ISSN_RE.match(value))


def bare_id_for_get(value: str, entity: EntityKind) -> str:
    """Strip prefixes that the ``/<entity>/<id>`` path must not repeat.

    ``https://openalex.org/W1`` -> ``W1``; ``domains/3`` -> ``3``;
    a bare DOI ``10.1/x`` -> ``doi:10.1/x``.
    """
    bare = value[len(OPENALEX_URL_PREFIX):] if value.startswith(OPENALEX_URL_PREFIX) else value
    prefix = f"{entity.path}/"
    if entity.hierarchy and bare.startswith(prefix):
        bare = bare[len(prefix):]
    if bare.startswith("10.") and "/" in bare:
        return f"doi:{bare}"
    return bare


@dataclass(slots=True)
class OpenAlexService:
    """Operations exposed by both the CLI and the MCP server."""

    client: OpenAlexClient
    max_workers: int = 4

    def list_entities(
        self,
        entity: str | EntityKind,
        params: ListParams,
        aliases: Mapping[str, Any] | None = None,
    ) -> SlimListResponse:
        """List records with alias values folded into ``params.filter``.

        Args:
            entity: Entity kind to list.
            params: Base parameters; ``params.filter`` is the raw filter.
            aliases: Alias name to value, see :func:`resolve_filter`.

        Returns:
            Meta plus summarized results.
        """
        kind = get_entity_kind(entity)
        composite = resolve_filter(
            self.client,
            kind,
            aliases or {},
            params.filter,
            max_workers=self.max_workers,
        )
        query = ListParams(
            filter=composite,
            search=params.search,
            sort=params.sort,
            per_page=params.per_page,
            page=params.page,
            cursor=params.cursor,
            sample=params.sample,
            seed=params.seed,
            select=params.select,
            group_by=params.group_by,
        )
        log.debug("Listing %s with %s", kind.path, query.to_query())
        return summarize_list(kind, self.client.list_entities(kind.path, query))

    def get_entity(self, entity: str | EntityKind, identifier: str, select: str | None = None) -> dict[str, Any]:
        """Fetch one full record by ID, external ID or name.

        Names are resolved to the most cited match (works: exact title).
        """
        kind = get_entity_kind(entity)
        value = identifier.strip()
        if not value:
            raise ValueError(f"Empty {kind.name} identifier")
        if not looks_like_identifier(value, kind):
            value = resolve_entity_id(self.client, value, kind)
            log.debug("Resolved %s %r to %s", kind.name, identifier, value)
        return self.client.get_entity(kind.path, bare_id_for_get(value, kind), GetParams(select=select))

    def autocomplete(self, entity: str | EntityKind, query: str) -> AutocompleteResponse:
        """Type-ahead search; only some kinds support it."""
        kind = get_entity_kind(entity)
        if not kind.autocomplete:
            raise ValueError(f"Autocomplete is not available for {kind.path}")
        return self.client.autocomplete(kind.path, query)

    def find_works(self, query: str, count: int | None = None, filter: str | None = None) -> FindWorksResponse:
        """Semantic work search; needs an OpenAlex API key."""
        if not self.client.api_key:
            raise ValueError("work find requires an OpenAlex API key (set OPENALEX_KEY)")
        return self.client.find_works(FindWorksParams(query=query, count=count, filter=filter))
