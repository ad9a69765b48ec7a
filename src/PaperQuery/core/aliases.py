"""Per-entity filter alias table.

Each alias is a short caller-facing name that expands to a native OpenAlex
filter key. Tuple order is the order conditions appear in the composed
filter string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from PaperQuery.core.entities import (
    AUTHOR,
    DOMAIN,
    FIELD,
    FUNDER,
    INSTITUTION,
    PUBLISHER,
    SOURCE,
    SUBFIELD,
    TOPIC,
    WORK,
    EntityKind,
    get_entity_kind,
)


class AliasKind(Enum):
    """How an alias value becomes a filter condition."""

    ENTITY = "entity"
    DIRECT = "direct"
    BOOLEAN = "boolean"


@dataclass(frozen=True, slots=True)
class AliasSpec:
    """Static mapping of one alias name to its native filter key.

    ``entity`` names the kind searched when an ENTITY value is not already
    an ID; it is None for DIRECT and BOOLEAN aliases.
    """

    name: str
    filter_key: str
    kind: AliasKind
    entity: EntityKind | None = None
    description: str = ""


def _entity(name: str, key: str, entity: EntityKind, description: str) -> AliasSpec:
    return AliasSpec(name, key, AliasKind.ENTITY, entity, description)


def _direct(name: str, key: str, description: str) -> AliasSpec:
    return AliasSpec(name, key, AliasKind.DIRECT, None, description)


def _boolean(name: str, key: str, description: str) -> AliasSpec:
    return AliasSpec(name, key, AliasKind.BOOLEAN, None, description)


_CITATIONS_HELP = "Citation count, e.g. '>100' or '10-50'"
_WORKS_HELP = "Works count, e.g. '>1000'"
_COUNTRY_HELP = "ISO country code, e.g. 'US'"
_CONTINENT_HELP = "Continent, e.g. 'europe'"

WORK_ALIASES: tuple[AliasSpec, ...] = (
    _entity("author", "authorships.author.id", AUTHOR, "Author name or ID (A...)"),
    _entity("topic", "primary_topic.id", TOPIC, "Topic name or ID (T...)"),
    _entity("domain", "primary_topic.domain.id", DOMAIN, "Domain name or ID"),
    _entity("field", "primary_topic.field.id", FIELD, "Field name or ID"),
    _entity("subfield", "primary_topic.subfield.id", SUBFIELD, "Subfield name or ID"),
    _entity(
        "publisher",
        "primary_location.source.publisher_lineage",
        PUBLISHER,
        "Publisher name or ID (P...)",
    ),
    _entity("source", "primary_location.source.id", SOURCE, "Journal/source name or ID (S...)"),
    _entity("institution", "authorships.institutions.lineage", INSTITUTION, "Institution name or ID (I...)"),
    _direct("year", "publication_year", "Publication year, e.g. '2024' or '2008-2024'"),
    _direct("citations", "cited_by_count", _CITATIONS_HELP),
    _direct("country", "authorships.institutions.country_code", _COUNTRY_HELP),
    _direct("continent", "authorships.institutions.continent", _CONTINENT_HELP),
    _direct("type", "type", "Work type, e.g. 'article'"),
    _boolean("open", "is_oa", "Only open access works"),
)

AUTHOR_ALIASES: tuple[AliasSpec, ...] = (
    _entity("institution", "last_known_institutions.id", INSTITUTION, "Institution name or ID (I...)"),
    _direct("country", "last_known_institutions.country_code", _COUNTRY_HELP),
    _direct("continent", "last_known_institutions.continent", _CONTINENT_HELP),
    _direct("citations", "cited_by_count", _CITATIONS_HELP),
    _direct("works", "works_count", _WORKS_HELP),
    _direct("h_index", "summary_stats.h_index", "h-index, e.g. '>50'"),
)

SOURCE_ALIASES: tuple[AliasSpec, ...] = (
    _entity("publisher", "host_organization_lineage", PUBLISHER, "Publisher name or ID (P...)"),
    _direct("country", "country_code", _COUNTRY_HELP),
    _direct("continent", "continent", _CONTINENT_HELP),
    _direct("type", "type", "Source type, e.g. 'journal'"),
    _boolean("open", "is_oa", "Only open access sources"),
    _direct("citations", "cited_by_count", _CITATIONS_HELP),
    _direct("works", "works_count", _WORKS_HELP),
)

INSTITUTION_ALIASES: tuple[AliasSpec, ...] = (
    _direct("country", "country_code", _COUNTRY_HELP),
    _direct("continent", "continent", _CONTINENT_HELP),
    _direct("type", "type", "Institution type, e.g. 'education'"),
    _direct("citations", "cited_by_count", _CITATIONS_HELP),
    _direct("works", "works_count", _WORKS_HELP),
)

TOPIC_ALIASES: tuple[AliasSpec, ...] = (
    _entity("domain", "domain.id", DOMAIN, "Domain name or ID"),
    _entity("field", "field.id", FIELD, "Field name or ID"),
    _entity("subfield", "subfield.id", SUBFIELD, "Subfield name or ID"),
    _direct("citations", "cited_by_count", _CITATIONS_HELP),
    _direct("works", "works_count", _WORKS_HELP),
)

PUBLISHER_ALIASES: tuple[AliasSpec, ...] = (
    _direct("country", "country_codes", _COUNTRY_HELP),
    _direct("continent", "continent", _CONTINENT_HELP),
    _direct("citations", "cited_by_count", _CITATIONS_HELP),
    _direct("works", "works_count", _WORKS_HELP),
)

FUNDER_ALIASES: tuple[AliasSpec, ...] = (
    _direct("country", "country_code", _COUNTRY_HELP),
    _direct("continent", "continent", _CONTINENT_HELP),
    _direct("citations", "cited_by_count", _CITATIONS_HELP),
    _direct("works", "works_count", _WORKS_HELP),
)

DOMAIN_ALIASES: tuple[AliasSpec, ...] = (
    _direct("works", "works_count", _WORKS_HELP),
)

FIELD_ALIASES: tuple[AliasSpec, ...] = (
    _entity("domain", "domain.id", DOMAIN, "Domain name or ID"),
    _direct("works", "works_count", _WORKS_HELP),
)

SUBFIELD_ALIASES: tuple[AliasSpec, ...] = (
    _entity("domain", "domain.id", DOMAIN, "Domain name or ID"),
    _entity("field", "field.id", FIELD, "Field name or ID"),
    _direct("works", "works_count", _WORKS_HELP),
)

ALIASES: Mapping[str, tuple[AliasSpec, ...]] = MappingProxyType(
    {
        WORK.name: WORK_ALIASES,
        AUTHOR.name: AUTHOR_ALIASES,
        SOURCE.name: SOURCE_ALIASES,
        INSTITUTION.name: INSTITUTION_ALIASES,
        TOPIC.name: TOPIC_ALIASES,
        PUBLISHER.name: PUBLISHER_ALIASES,
        FUNDER.name: FUNDER_ALIASES,
        DOMAIN.name: DOMAIN_ALIASES,
        FIELD.name: FIELD_ALIASES,
        SUBFIELD.name: SUBFIELD_ALIASES,
    }
)


def aliases_for(entity: str | EntityKind) -> tuple[AliasSpec, ...]:
    """Return the alias table of one entity kind.

    Raises:
        ValueError: If ``entity`` is not a known entity kind.
    """
    return ALIASES[get_entity_kind(entity).name]
