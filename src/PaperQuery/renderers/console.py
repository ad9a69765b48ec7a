"""Console text renderers.

Renders summaries and envelopes into human-friendly text blocks for the
CLI. JSON output is handled by ``renderers.json``.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable

from PaperQuery.core.summary import SlimListResponse, WorkSummary
from PaperQuery.openalex.response import AutocompleteResponse, FindWorksResponse
from PaperQuery.services.text import DIRECT_URL, OPENALEX_CONTENT, ZOTERO_LOCAL, ZOTERO_REMOTE, PdfSource, WorkText
from PaperQuery.services.zotero import ItemSummary, PagedSummary

_ABSTRACT_PREVIEW = 300


def _fmt(value: Any) -> str:
    if value is None or value == [] or value == "":
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3].rstrip() + "..."


def _work_lines(idx: int, work: WorkSummary) -> list[str]:
    year = f" ({work.publication_year})" if work.publication_year else ""
    lines = [f"{idx}. {work.title or '(untitled)'}{year}"]
    if work.authors:
        shown = work.authors[:5]
        more = f" +{len(work.authors) - len(shown)} more" if len(work.authors) > len(shown) else ""
        lines.append(f"   Authors: {', '.join(shown)}{more}")
    if work.journal:
        lines.append(f"   Journal: {work.journal}")
    lines.append(f"   Type: {_fmt(work.type)}  Citations: {_fmt(work.cited_by_count)}  OA: {_fmt(work.is_oa)}")
    if work.primary_topic:
        lines.append(f"   Topic: {work.primary_topic}")
    if work.doi:
        lines.append(f"   DOI: {work.doi}")
    lines.append(f"   ID: {_fmt(work.id)}")
    return lines


def _record_lines(idx: int, record: Any) -> list[str]:
    values = {f.name: getattr(record, f.name) for f in dataclasses.fields(record)}
    title = None
    for name in ("display_name", "title", "name", "tag"):
        if name in values:
            title = values.pop(name)
            break
    title = title or values.get("key") or values.get("id")
    lines = [f"{idx}. {title}"]
    record_id = values.pop("id", None)
    for name, value in values.items():
        if value in (None, [], ""):
            continue
        label = name.replace("_", " ").capitalize()
        text = _truncate(_fmt(value), _ABSTRACT_PREVIEW) if name in ("description", "abstract") else _fmt(value)
        lines.append(f"   {label}: {text}")
    if record_id:
        lines.append(f"   ID: {record_id}")
    return lines


def render_records(records: Iterable[Any], *, start: int = 1) -> str:
    """Render summary dataclasses as a numbered text block."""
    lines: list[str] = []
    for idx, record in enumerate(records, start=start):
        if isinstance(record, WorkSummary):
            lines.extend(_work_lines(idx, record))
        elif isinstance(record, ItemSummary):
            lines.extend(_item_lines(idx, record))
        else:
            lines.extend(_record_lines(idx, record))
        lines.append("")
    return "\n".join(lines).rstrip() + "\n" if lines else ""


def render_list(entity_path: str, response: SlimListResponse) -> str:
    """Render one page of an OpenAlex list.

    Args:
        entity_path: Collection name used in the header, e.g. ``works``.
        response: Summarized list response.

    Returns:
        Header line plus numbered records.
    """
    meta = response.meta
    header = f"Found {meta.count:,} {entity_path}"
    if meta.page and meta.per_page:
        header += f" (page {meta.page}, {meta.per_page} per page)"
    start = ((meta.page or 1) - 1) * (meta.per_page or 0) + 1
    body = render_records(response.results, start=start)
    footer = f"Next cursor: {meta.next_cursor}\n" if meta.next_cursor else ""
    return f"{header}\n\n{body}{footer}" if body else f"{header}\n"


def render_record(record: Any) -> str:
    """Render a single summary, with the full abstract for works."""
    text = render_records([record])
    if isinstance(record, WorkSummary) and record.abstract:
        text += f"\n{record.abstract}\n"
    return text


def render_autocomplete(response: AutocompleteResponse) -> str:
    lines: list[str] = []
    for idx, hit in enumerate(response.results, start=1):
        hint = f" [{hit.hint}]" if hit.hint else ""
        lines.append(f"{idx}. {hit.display_name}{hint}")
        lines.append(f"   Citations: {_fmt(hit.cited_by_count)}  Works: {_fmt(hit.works_count)}  ID: {hit.id}")
    return "\n".join(lines) + "\n" if lines else "No matches\n"


def render_find_works(response: FindWorksResponse, summaries: list[WorkSummary]) -> str:
    lines: list[str] = []
    for idx, (hit, work) in enumerate(zip(response.results, summaries), start=1):
        block = _work_lines(idx, work)
        block.insert(1, f"   Score: {hit.score:.3f}")
        lines.extend(block)
        lines.append("")
    return "\n".join(lines).rstrip() + "\n" if lines else "No matches\n"


def render_paged(label: str, page: PagedSummary) -> str:
    """Render a Zotero page of slim records."""
    total = f"{page.total:,}" if page.total is not None else str(len(page.items))
    body = render_records(page.items)
    return f"{total} {label}\n\n{body}" if body else f"{total} {label}\n"


def _item_lines(idx: int, item: ItemSummary) -> list[str]:
    lines = [f"{idx}. {item.title or '(untitled)'} [{item.key}]"]
    if item.creators:
        lines.append(f"   Creators: {'; '.join(item.creators)}")
    meta = [part for part in (item.item_type, item.date, item.publication_title) if part]
    if meta:
        lines.append(f"   {' | '.join(meta)}")
    if item.doi:
        lines.append(f"   DOI: {item.doi}")
    if item.tags:
        lines.append(f"   Tags: {', '.join(item.tags)}")
    return lines


def _source_label(source: PdfSource) -> str:
    if source.type == ZOTERO_LOCAL:
        return f"Zotero (local: {source.path})"
    if source.type == ZOTERO_REMOTE:
        return f"Zotero (remote: {source.item_key})"
    if source.type == DIRECT_URL:
        return f"Direct URL: {source.url}"
    if source.type == OPENALEX_CONTENT:
        return "OpenAlex Content API"
    return source.type


def render_work_text(result: WorkText) -> str:
    """Header block (work, ID, DOI, source, length) followed by the text."""
    lines: list[str] = []
    if result.title:
        lines.append(f"Work: {result.title}")
    lines.append(f"ID:   {result.work_id}")
    if result.doi:
        lines.append(f"DOI:  {result.doi}")
    lines.append(f"Source: {_source_label(result.source)}")
    lines.append(f"Length: {len(result.text):,} characters")
    text = result.text if result.text.endswith("\n") else result.text + "\n"
    return "\n".join(lines) + "\n\n" + text
