"""Slim summaries of OpenAlex records.

Full OpenAlex records run to hundreds of fields. The summaries keep the
handful a reader (or a language model) actually needs and flatten nested
names, so list output stays small.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from PaperQuery.core.entities import EntityKind, get_entity_kind
from PaperQuery.openalex.response import ListMeta, ListResponse


@dataclass(frozen=True, slots=True)
class WorkSummary:
    id: str | None
    title: str | None
    doi: str | None
    publication_year: int | None
    type: str | None
    authors: list[str]
    journal: str | None
    is_oa: bool | None
    oa_url: str | None
    cited_by_count: int | None
    primary_topic: str | None
    abstract: str | None


@dataclass(frozen=True, slots=True)
class AuthorSummary:
    id: str | None
    display_name: str | None
    orcid: str | None
    works_count: int | None
    cited_by_count: int | None
    h_index: int | None
    last_known_institutions: list[str]
    top_topics: list[str]


@dataclass(frozen=True, slots=True)
class SourceSummary:
    id: str | None
    display_name: str | None
    issn_l: str | None
    type: str | None
    is_oa: bool | None
    is_in_doaj: bool | None
    works_count: int | None
    cited_by_count: int | None
    h_index: int | None
    host_organization_name: str | None


@dataclass(frozen=True, slots=True)
class InstitutionSummary:
    id: str | None
    display_name: str | None
    ror: str | None
    country_code: str | None
    type: str | None
    city: str | None
    works_count: int | None
    cited_by_count: int | None
    h_index: int | None


@dataclass(frozen=True, slots=True)
class TopicSummary:
    id: str | None
    display_name: str | None
    description: str | None
    subfield: str | None
    field: str | None
    domain: str | None
    works_count: int | None
    cited_by_count: int | None


@dataclass(frozen=True, slots=True)
class PublisherSummary:
    id: str | None
    display_name: str | None
    hierarchy_level: int | None
    country_codes: list[str]
    works_count: int | None
    cited_by_count: int | None


@dataclass(frozen=True, slots=True)
class FunderSummary:
    id: str | None
    display_name: str | None
    country_code: str | None
    description: str | None
    awards_count: int | None
    works_count: int | None
    cited_by_count: int | None


@dataclass(frozen=True, slots=True)
class DomainSummary:
    id: str | None
    display_name: str | None
    description: str | None
    fields: list[str]
    works_count: int | None
    cited_by_count: int | None


@dataclass(frozen=True, slots=True)
class FieldSummary:
    id: str | None
    display_name: str | None
    description: str | None
    domain: str | None
    subfield_count: int
    works_count: int | None
    cited_by_count: int | None


@dataclass(frozen=True, slots=True)
class SubfieldSummary:
    id: str | None
    display_name: str | None
    description: str | None
    field: str | None
    domain: str | None
    works_count: int | None
    cited_by_count: int | None


@dataclass(frozen=True, slots=True)
class SlimListResponse:
    """List envelope with summarized results; ``group_by`` is dropped."""

    meta: ListMeta
    results: list[Any]


def reconstruct_abstract(inverted_index: Mapping[str, Any] | None) -> str | None:
    """Rebuild abstract text from OpenAlex's ``abstract_inverted_index``.

    Args:
        inverted_index: Mapping of word to the positions it occupies.

    Returns:
        The abstract with words in position order, or None when absent.
    """
    if not inverted_index:
        return None
    positioned: list[tuple[int, str]] = []
    for word, positions in inverted_index.items():
        if not isinstance(positions, list):
            continue
        positioned.extend((pos, word) for pos in positions if isinstance(pos, int))
    if not positioned:
        return None
    positioned.sort()
    return " ".join(word for _, word in positioned)


def _dig(record: Mapping[str, Any] | None, *path: str) -> Any:
    current: Any = record
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _names(items: Any, key: str = "display_name", limit: int | None = None) -> list[str]:
    if not isinstance(items, list):
        return []
    names = [str(_dig(item, key)) for item in items if _dig(item, key)]
    return names[:limit] if limit is not None else names


def summarize_work(work: Mapping[str, Any]) -> WorkSummary:
    authors = [
        str(name)
        for name in (_dig(a, "author", "display_name") for a in work.get("authorships") or [])
        if name
    ]
    return WorkSummary(
        id=work.get("id"),
        title=work.get("display_name") or work.get("title"),
        doi=work.get("doi"),
        publication_year=work.get("publication_year"),
        type=work.get("type"),
        authors=authors,
        journal=_dig(work, "primary_location", "source", "display_name"),
        is_oa=_dig(work, "open_access", "is_oa"),
        oa_url=_dig(work, "open_access", "oa_url"),
        cited_by_count=work.get("cited_by_count"),
        primary_topic=_dig(work, "primary_topic", "display_name"),
        abstract=reconstruct_abstract(work.get("abstract_inverted_index")),
    )


def summarize_author(author: Mapping[str, Any]) -> AuthorSummary:
    return AuthorSummary(
        id=author.get("id"),
        display_name=author.get("display_name"),
        orcid=author.get("orcid"),
        works_count=author.get("works_count"),
        cited_by_count=author.get("cited_by_count"),
        h_index=_dig(author, "summary_stats", "h_index"),
        last_known_institutions=_names(author.get("last_known_institutions")),
        top_topics=_names(author.get("topics"), limit=3),
    )


def summarize_source(source: Mapping[str, Any]) -> SourceSummary:
    return SourceSummary(
        id=source.get("id"),
        display_name=source.get("display_name"),
        issn_l=source.get("issn_l"),
        type=source.get("type"),
        is_oa=source.get("is_oa"),
        is_in_doaj=source.get("is_in_doaj"),
        works_count=source.get("works_count"),
        cited_by_count=source.get("cited_by_count"),
        h_index=_dig(source, "summary_stats", "h_index"),
        host_organization_name=source.get("host_organization_name"),
    )


def summarize_institution(institution: Mapping[str, Any]) -> InstitutionSummary:
    return InstitutionSummary(
        id=institution.get("id"),
        display_name=institution.get("display_name"),
        ror=institution.get("ror"),
        country_code=institution.get("country_code"),
        type=institution.get("type"),
        city=_dig(institution, "geo", "city"),
        works_count=institution.get("works_count"),
        cited_by_count=institution.get("cited_by_count"),
        h_index=_dig(institution, "summary_stats", "h_index"),
    )


def summarize_topic(topic: Mapping[str, Any]) -> TopicSummary:
    return TopicSummary(
        id=topic.get("id"),
        display_name=topic.get("display_name"),
        description=topic.get("description"),
        subfield=_dig(topic, "subfield", "display_name"),
        field=_dig(topic, "field", "display_name"),
        domain=_dig(topic, "domain", "display_name"),
        works_count=topic.get("works_count"),
        cited_by_count=topic.get("cited_by_count"),
    )


def summarize_publisher(publisher: Mapping[str, Any]) -> PublisherSummary:
    return PublisherSummary(
        id=publisher.get("id"),
        display_name=publisher.get("display_name"),
        hierarchy_level=publisher.get("hierarchy_level"),
        country_codes=[str(code) for code in publisher.get("country_codes") or []],
        works_count=publisher.get("works_count"),
        cited_by_count=publisher.get("cited_by_count"),
    )


def summarize_funder(funder: Mapping[str, Any]) -> FunderSummary:
    return FunderSummary(
        id=funder.get("id"),
        display_name=funder.get("display_name"),
        country_code=funder.get("country_code"),
        description=funder.get("description"),
        awards_count=funder.get("awards_count") or funder.get("grants_count"),
        works_count=funder.get("works_count"),
        cited_by_count=funder.get("cited_by_count"),
    )


def summarize_domain(domain: Mapping[str, Any]) -> DomainSummary:
    return DomainSummary(
        id=domain.get("id"),
        display_name=domain.get("display_name"),
        description=domain.get("description"),
        fields=_names(domain.get("fields")),
        works_count=domain.get("works_count"),
        cited_by_count=domain.get("cited_by_count"),
    )


def summarize_field(field: Mapping[str, Any]) -> FieldSummary:
    subfields = field.get("subfields")
    return FieldSummary(
        id=field.get("id"),
        display_name=field.get("display_name"),
        description=field.get("description"),
        domain=_dig(field, "domain", "display_name"),
        subfield_count=len(subfields) if isinstance(subfields, list) else 0,
        works_count=field.get("works_count"),
        cited_by_count=field.get("cited_by_count"),
    )


def summarize_subfield(subfield: Mapping[str, Any]) -> SubfieldSummary:
    return SubfieldSummary(
        id=subfield.get("id"),
        display_name=subfield.get("display_name"),
        description=subfield.get("description"),
        field=_dig(subfield, "field", "display_name"),
        domain=_dig(subfield, "domain", "display_name"),
        works_count=subfield.get("works_count"),
        cited_by_count=subfield.get("cited_by_count"),
    )


SUMMARIZERS: Mapping[str, Callable[[Mapping[str, Any]], Any]] = {
    "work": summarize_work,
    "author": summarize_author,
    "source": summarize_source,
    "institution": summarize_institution,
    "topic": summarize_topic,
    "publisher": summarize_publisher,
    "funder": summarize_funder,
    "domain": summarize_domain,
    "field": summarize_field,
    "subfield": summarize_subfield,
}


def summarize(entity: str | EntityKind, record: Mapping[str, Any]) -> Any:
    """Summarize one raw record of the given entity kind."""
    return SUMMARIZERS[get_entity_kind(entity).name](record)


def summarize_list(entity: str | EntityKind, response: ListResponse) -> SlimListResponse:
    """Summarize every result of a list response, keeping its meta."""
    summarizer = SUMMARIZERS[get_entity_kind(entity).name]
    return SlimListResponse(meta=response.meta, results=[summarizer(item) for item in response.results])
