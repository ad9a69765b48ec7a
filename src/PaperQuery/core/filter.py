"""Filter alias resolution.

Turns caller-friendly alias values (``author="einstein"``, ``year="2020-2024"``,
``open=True``) into one native OpenAlex filter string. Entity-reference
values that are not already OpenAlex IDs are looked up by name with one
citation-ranked search per ``|``-separated segment.
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Mapping, Protocol

from PaperQuery.core.aliases import AliasKind, AliasSpec, aliases_for
from PaperQuery.core.entities import PUBLISHER, WORK, EntityKind, get_entity_kind
from PaperQuery.openalex.params import ListParams
from PaperQuery.openalex.response import ListResponse
from PaperQuery.utils.log import log

OPENALEX_URL_PREFIX = "https://openalex.org/"

_DIGITS_RE = re.compile(r"^\d+$")
_MAX_SUGGESTIONS = 5


class EntityLister(Protocol):
    """The one client operation resolution needs."""

    def list_entities(self, entity: str, params: ListParams) -> ListResponse:
        raise NotImplementedError


class FilterError(Exception):
    """Base exception for filter composition failures."""


class ConflictingFilterError(FilterError):
    """An alias maps to a key that the raw filter already constrains."""

    def __init__(self, alias: str, filter_key: str) -> None:
        self.alias = alias
        self.filter_key = filter_key
        super().__init__(f"Conflict: '{alias}' alias maps to '{filter_key}' which is already in --filter")


class UnresolvedSearchError(FilterError):
    """A name search returned no match."""

    def __init__(self, entity: EntityKind, query: str) -> None:
        self.entity = entity
        self.query = query
        super().__init__(f'No {entity.path} found matching "{query}"')


class AmbiguousTitleError(FilterError):
    """A work title search matched several works and none exactly."""

    def __init__(self, query: str, suggestions: list[tuple[str, int]]) -> None:
        self.query = query
        self.suggestions = suggestions
        lines = "\n".join(f"  - {name} ({count} citations)" for name, count in suggestions)
        super().__init__(f"Did you mean:\n{lines}")


def is_openalex_id(value: str, entity: EntityKind) -> bool:
    """Return True when ``value`` already identifies an ``entity`` record.

    Accepts ``https://openalex.org/...`` URIs, the kind's short form
    (``A5083138872`` for authors) and, for hierarchy kinds, ``fields/17``
    or a bare ``17``.
    """
    if value.startswith(OPENALEX_URL_PREFIX):
        return True
    if entity.hierarchy:
        prefix = f"{entity.path}/"
        rest = value[len(prefix):] if value.startswith(prefix) else value
        return bool(_DIGITS_RE.match(rest))
    return (
        len(value) > 1
        and value[0] == entity.id_prefix
        and bool(_DIGITS_RE.match(value[1:]))
    )


def normalize_id(value: str, entity: EntityKind) -> str:
    """Return the short filter form of an ID accepted by :func:`is_openalex_id`."""
    short = value[len(OPENALEX_URL_PREFIX):] if value.startswith(OPENALEX_URL_PREFIX) else value
    if entity.hierarchy and _DIGITS_RE.match(short):
        return f"{entity.path}/{short}"
    return short


def _short_id(raw_id: str) -> str:
    return raw_id[len(OPENALEX_URL_PREFIX):] if raw_id.startswith(OPENALEX_URL_PREFIX) else raw_id


def resolve_entity_id(client: EntityLister, query: str, entity: EntityKind) -> str:
    """Look up the most cited ``entity`` record whose name matches ``query``.

    Publishers are matched with full-text ``search`` because their alternate
    titles are not covered by ``display_name.search``. Works are matched on
    title and must be unambiguous.

    Args:
        client: OpenAlex client.
        query: Free-text name.
        entity: Kind to search.

    Returns:
        Short ID of the best match, e.g. ``A5083138872`` or ``domains/3``.

    Raises:
        UnresolvedSearchError: If nothing matches.
        AmbiguousTitleError: If a work title matches several works.
    """
    if entity is WORK:
        return _resolve_work_title(client, query)
    if entity is PUBLISHER:
        params = ListParams(search=query, sort="cited_by_count:desc", per_page=1, select="id,display_name")
    else:
        params = ListParams(
            filter=f"display_name.search:{query}",
            sort="cited_by_count:desc",
            per_page=1,
            select="id,display_name",
        )
    response = client.list_entities(entity.path, params)
    first = response.results[0] if response.results else None
    raw_id = first.get("id") if first else None
    if not raw_id:
        raise UnresolvedSearchError(entity, query)
    resolved = _short_id(str(raw_id))
    log.debug("Resolved %s %r -> %s (%s)", entity.name, query, resolved, first.get("display_name"))
    return resolved


def _resolve_work_title(client: EntityLister, query: str) -> str:
    params = ListParams(filter=f"title.search:{query}", per_page=200, select="id,display_name,cited_by_count")
    results = [item for item in client.list_entities(WORK.path, params).results if item.get("id")]
    if not results:
        raise UnresolvedSearchError(WORK, query)
    wanted = query.strip().casefold()
    for item in results:
        if str(item.get("display_name") or "").strip().casefold() == wanted:
            return _short_id(str(item["id"]))
    if len(results) == 1:
        return _short_id(str(results[0]["id"]))
    ranked = sorted(results, key=lambda item: item.get("cited_by_count") or 0, reverse=True)
    suggestions = [
        (str(item.get("display_name") or "?"), int(item.get("cited_by_count") or 0))
        for item in ranked[:_MAX_SUGGESTIONS]
    ]
    raise AmbiguousTitleError(query, suggestions)


def split_segments(value: str) -> list[str]:
    """Split an OR value on ``|``, dropping blank segments."""
    return [segment.strip() for segment in value.split("|") if segment.strip()]


def raw_filter_keys(raw_filter: str | None) -> list[str]:
    """Return the key of each clause in a raw filter string.

    ``!`` negation is ignored, so ``!is_oa:true`` yields ``is_oa``.
    """
    if not raw_filter:
        return []
    keys: list[str] = []
    for clause in raw_filter.split(","):
        clause = clause.strip()
        if not clause:
            continue
        key = clause.split(":", 1)[0].strip()
        keys.append(key[1:] if key.startswith("!") else key)
    return keys


def check_filter_overlap(active: list[AliasSpec], raw_filter: str | None) -> None:
    """Fail if any active alias targets a key already in the raw filter.

    Raises:
        ConflictingFilterError: On the first collision, in alias order.
    """
    raw_keys = set(raw_filter_keys(raw_filter))
    for spec in active:
        if spec.filter_key in raw_keys:
            raise ConflictingFilterError(spec.name, spec.filter_key)


def _is_active(spec: AliasSpec, value: Any) -> bool:
    if value is None or value is False:
        return False
    if spec.kind is AliasKind.BOOLEAN:
        return bool(value)
    return str(value).strip() != ""


def resolve_filter(
    client: EntityLister,
    entity: str | EntityKind,
    alias_values: Mapping[str, Any],
    raw_filter: str | None = None,
    *,
    max_workers: int = 4,
) -> str | None:
    """Compose alias values and a raw filter into one native filter string.

    Conditions come out in alias-table order, followed by the raw filter's
    clauses. Name lookups for every entity-reference segment run in a
    thread pool; results are placed back in input order.

    Args:
        client: OpenAlex client used for name lookups.
        entity: Entity kind being listed, e.g. ``"work"``.
        alias_values: Alias name to value. Booleans take True/False; None,
            False and blank strings mean "not given".
        raw_filter: Native filter string supplied verbatim by the caller.
        max_workers: Upper bound on concurrent name lookups.

    Returns:
        Composite filter, or None when neither aliases nor a raw filter apply.

    Raises:
        ValueError: If an alias name is unknown for ``entity`` or an
            entity-reference value has no non-blank segment.
        ConflictingFilterError: If an alias collides with a raw filter key.
            Raised before any lookup is issued.
        UnresolvedSearchError: If a name lookup finds nothing.
        OpenAlexError: Propagated unchanged from lookups.
    """
    kind = get_entity_kind(entity)
    table = aliases_for(kind)
    known = {spec.name for spec in table}
    unknown = sorted(name for name in alias_values if name not in known)
    if unknown:
        raise ValueError(f"Unknown {kind.name} filter alias(es): {', '.join(unknown)}")

    active = [spec for spec in table if _is_active(spec, alias_values.get(spec.name))]
    check_filter_overlap(active, raw_filter)

    # (spec, segments) per active alias; a segment is either a final ID or
    # an index into ``lookups``.
    planned: list[tuple[AliasSpec, list[str | int]]] = []
    lookups: list[tuple[str, EntityKind]] = []
    for spec in active:
        value = alias_values[spec.name]
        if spec.kind is AliasKind.BOOLEAN:
            planned.append((spec, ["true"]))
        elif spec.kind is AliasKind.DIRECT:
            planned.append((spec, [str(value).strip()]))
        else:
            assert spec.entity is not None
            segments = split_segments(str(value))
            if not segments:
                raise ValueError(f"Empty value for '{spec.name}' filter")
            slots: list[str | int] = []
            for segment in segments:
                if is_openalex_id(segment, spec.entity):
                    slots.append(normalize_id(segment, spec.entity))
                else:
                    slots.append(len(lookups))
                    lookups.append((segment, spec.entity))
            planned.append((spec, slots))

    resolved = _run_lookups(client, lookups, max_workers)

    conditions = [
        f"{spec.filter_key}:"
        + "|".join(resolved[slot] if isinstance(slot, int) else slot for slot in slots)
        for spec, slots in planned
    ]
    conditions.extend(clause.strip() for clause in (raw_filter or "").split(",") if clause.strip())
    if not conditions:
        return None
    composite = ",".join(conditions)
    log.debug("Composed %s filter: %s", kind.name, composite)
    return composite


def _run_lookups(client: EntityLister, lookups: list[tuple[str, EntityKind]], max_workers: int) -> list[str]:
    if not lookups:
        return []
    if max_workers <= 1 or len(lookups) == 1:
        return [resolve_entity_id(client, query, entity) for query, entity in lookups]
    with ThreadPoolExecutor(max_workers=min(max_workers, len(lookups))) as executor:
        futures = [executor.submit(resolve_entity_id, client, query, entity) for query, entity in lookups]
        return [future.result() for future in futures]
