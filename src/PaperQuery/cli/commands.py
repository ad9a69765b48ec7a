"""Command bodies shared by the click commands.

Each function takes a service plus parsed arguments and returns the text
to print, so commands can be exercised without click.
"""

from __future__ import annotations

from typing import Any, Mapping

from PaperQuery.core.entities import EntityKind
from PaperQuery.core.summary import summarize, summarize_work
from PaperQuery.openalex.params import ListParams
from PaperQuery.renderers.console import (
    render_autocomplete,
    render_find_works,
    render_list,
    render_paged,
    render_record,
    render_work_text,
)
from PaperQuery.renderers.json import render_json
from PaperQuery.services.openalex import OpenAlexService
from PaperQuery.services.text import WorkTextService
from PaperQuery.services.zotero import (
    PagedSummary,
    ZoteroService,
    summarize_collection,
    summarize_item,
)


def list_entities(
    service: OpenAlexService,
    kind: EntityKind,
    params: ListParams,
    aliases: Mapping[str, Any],
    *,
    as_json: bool,
) -> str:
    result = service.list_entities(kind, params, aliases)
    return render_json(result) if as_json else render_list(kind.path, result)


def get_entity(
    service: OpenAlexService,
    kind: EntityKind,
    identifier: str,
    *,
    select: str | None,
    as_json: bool,
) -> str:
    """Full record as JSON, or its summary as text."""
    record = service.get_entity(kind, identifier, select=select)
    return render_json(record) if as_json else render_record(summarize(kind, record))


def autocomplete(service: OpenAlexService, kind: EntityKind, query: str, *, as_json: bool) -> str:
    result = service.autocomplete(kind, query)
    return render_json(result) if as_json else render_autocomplete(result)


def find_works(
    service: OpenAlexService,
    query: str,
    *,
    count: int | None,
    filter_expr: str | None,
    as_json: bool,
) -> str:
    result = service.find_works(query, count=count, filter=filter_expr)
    if as_json:
        return render_json(result)
    return render_find_works(result, [summarize_work(hit.work) for hit in result.results])


def work_text(service: WorkTextService, identifier: str, *, as_json: bool) -> str:
    result = service.work_text(identifier)
    return render_json(result) if as_json else render_work_text(result)


def zotero_page(page: PagedSummary, label: str, *, as_json: bool) -> str:
    return render_json(page) if as_json else render_paged(label, page)


def zotero_item(service: ZoteroService, value: str, *, as_json: bool) -> str:
    record = service.get_item(value)
    return render_json(record) if as_json else render_record(summarize_item(record))


def zotero_collection(service: ZoteroService, value: str, *, as_json: bool) -> str:
    record = service.get_collection(value)
    return render_json(record) if as_json else render_record(summarize_collection(record))


def zotero_fulltext(service: ZoteroService, value: str, *, as_json: bool) -> str:
    record = service.item_fulltext(value)
    if as_json:
        return render_json(record)
    return str(record.get("content") or "")
