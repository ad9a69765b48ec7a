"""Queryable OpenAlex entity kinds."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class EntityKind:
    """One OpenAlex record category.

    Attributes:
        name: Singular name used by the CLI and MCP tools (``"work"``).
        path: API collection path (``"works"``).
        id_prefix: Letter of short IDs (``"W"``); None for hierarchy kinds.
        autocomplete: Whether ``/autocomplete/<path>`` exists for the kind.
    """

    name: str
    path: str
    id_prefix: str | None
    autocomplete: bool

    @property
    def hierarchy(self) -> bool:
        """Domains, fields and subfields use numeric ``<path>/<n>`` IDs."""
        return self.id_prefix is None


WORK = EntityKind("work", "works", "W", True)
AUTHOR = EntityKind("author", "authors", "A", True)
SOURCE = EntityKind("source", "sources", "S", True)
INSTITUTION = EntityKind("institution", "institutions", "I", True)
TOPIC = EntityKind("topic", "topics", "T", False)
PUBLISHER = EntityKind("publisher", "publishers", "P", True)
FUNDER = EntityKind("funder", "funders", "F", True)
DOMAIN = EntityKind("domain", "domains", None, False)
FIELD = EntityKind("field", "fields", None, False)
SUBFIELD = EntityKind("subfield", "subfields", None, True)

ENTITY_KINDS: tuple[EntityKind, ...] = (
    WORK,
    AUTHOR,
    SOURCE,
    INSTITUTION,
    TOPIC,
    PUBLISHER,
    FUNDER,
    DOMAIN,
    FIELD,
    SUBFIELD,
)

_BY_NAME: Mapping[str, EntityKind] = MappingProxyType(
    {alias: kind for kind in ENTITY_KINDS for alias in (kind.name, kind.path)}
)


def get_entity_kind(name: str | EntityKind) -> EntityKind:
    """Look up an entity kind by singular or plural name.

    Raises:
        ValueError: If the name is not a known entity kind.
    """
    if isinstance(name, EntityKind):
        return name
    kind = _BY_NAME.get(str(name).strip().lower())
    if kind is None:
        known = ", ".join(k.name for k in ENTITY_KINDS)
        raise ValueError(f"Unknown entity kind: {name!r} (expected one of: {known})")
    return kind
