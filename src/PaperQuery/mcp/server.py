"""PaperQuery MCP server built with FastMCP.

Exposes the same operations as the CLI as MCP tools. Tools return JSON
text; failures come back as ``"Error: ..."`` strings instead of protocol
errors.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv
from fastmcp import FastMCP

from PaperQuery.config import AppConfig, load_config
from PaperQuery.core.entities import ENTITY_KINDS, EntityKind
from PaperQuery.mcp.tools import PaperTools
from PaperQuery.utils.log import configure_logging, log

INSTRUCTIONS = """
Scholarly search over OpenAlex plus read access to the user's Zotero library.

- <kind>_list tools take alias filters (author, topic, year, open, ...) that
  are resolved to OpenAlex IDs automatically; names work, e.g.
  work_list(author="einstein", year="1905"). Use `|` for OR: "acm|ieee".
  The raw `filter` parameter takes native OpenAlex filter syntax and must not
  repeat a key that an alias already sets.
- <kind>_get accepts OpenAlex IDs, DOIs, ORCIDs, ROR IDs, ISSNs or a name.
- work_text returns the extracted PDF text of one work with its source.
- zotero_* tools accept item/collection keys or a title/name fragment.
- Every tool returns JSON; failures return a string starting with "Error:".
"""


def _register_openalex_list_tools(mcp: FastMCP, tools: PaperTools) -> None:
    @mcp.tool(name="work_list", description="List scholarly works with alias filters.", tags={"openalex", "work"})
    def work_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        cursor: str | None = None,
        sample: int | None = None,
        seed: int | None = None,
        author: str | None = None,
        topic: str | None = None,
        domain: str | None = None,
        field: str | None = None,
        subfield: str | None = None,
        publisher: str | None = None,
        source: str | None = None,
        institution: str | None = None,
        year: str | None = None,
        citations: str | None = None,
        country: str | None = None,
        continent: str | None = None,
        type: str | None = None,
        open: bool = False,
    ) -> str:
        """List works.

        Args:
            search: Full-text search over title, abstract and full text.
            filter: Raw OpenAlex filter, e.g. "is_retracted:false".
            sort: Sort expression, e.g. "cited_by_count:desc".
            per_page: Results per page (1-200).
            page: Page number.
            cursor: Cursor for deep pagination ("*" to start).
            sample: Random sample size.
            seed: Seed for reproducible samples.
            author: Author name or ID (A...).
            topic: Topic name or ID (T...).
            domain: Domain name or ID.
            field: Field name or ID.
            subfield: Subfield name or ID.
            publisher: Publisher name or ID (P...).
            source: Journal/source name or ID (S...).
            institution: Institution name or ID (I...).
            year: Publication year or range, e.g. "2008-2024", ">2020".
            citations: Citation count, e.g. ">100".
            country: Author institution country code, e.g. "US".
            continent: Author institution continent.
            type: Work type, e.g. "article".
            open: Only open access works.
        """
        aliases = dict(
            author=author,
            topic=topic,
            domain=domain,
            field=field,
            subfield=subfield,
            publisher=publisher,
            source=source,
            institution=institution,
            year=year,
            citations=citations,
            country=country,
            continent=continent,
            type=type,
            open=open,
        )
        return tools.entity_list(
            "work",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            cursor=cursor,
            sample=sample,
            seed=seed,
            aliases=aliases,
        )

    @mcp.tool(name="author_list", description="List authors with alias filters.", tags={"openalex", "author"})
    def author_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        cursor: str | None = None,
        sample: int | None = None,
        seed: int | None = None,
        institution: str | None = None,
        country: str | None = None,
        continent: str | None = None,
        citations: str | None = None,
        works: str | None = None,
        h_index: str | None = None,
    ) -> str:
        """List authors.

        Args:
            search: Name search.
            filter: Raw OpenAlex filter.
            institution: Last known institution name or ID (I...).
            country: Last known institution country code.
            continent: Last known institution continent.
            citations: Citation count, e.g. ">1000".
            works: Works count, e.g. ">50".
            h_index: h-index, e.g. ">30".
        """
        aliases = dict(
            institution=institution,
            country=country,
            continent=continent,
            citations=citations,
            works=works,
            h_index=h_index,
        )
        return tools.entity_list(
            "author",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            cursor=cursor,
            sample=sample,
            seed=seed,
            aliases=aliases,
        )

    @mcp.tool(name="source_list", description="List journals and other sources.", tags={"openalex", "source"})
    def source_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        cursor: str | None = None,
        sample: int | None = None,
        seed: int | None = None,
        publisher: str | None = None,
        country: str | None = None,
        continent: str | None = None,
        type: str | None = None,
        open: bool = False,
        citations: str | None = None,
        works: str | None = None,
    ) -> str:
        """List sources.

        Args:
            publisher: Publisher name or ID (P...).
            type: Source type, e.g. "journal".
            open: Only open access sources.
        """
        aliases = dict(
            publisher=publisher,
            country=country,
            continent=continent,
            type=type,
            open=open,
            citations=citations,
            works=works,
        )
        return tools.entity_list(
            "source",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            cursor=cursor,
            sample=sample,
            seed=seed,
            aliases=aliases,
        )

    @mcp.tool(name="institution_list", description="List institutions.", tags={"openalex", "institution"})
    def institution_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        cursor: str | None = None,
        sample: int | None = None,
        seed: int | None = None,
        country: str | None = None,
        continent: str | None = None,
        type: str | None = None,
        citations: str | None = None,
        works: str | None = None,
    ) -> str:
        aliases = dict(country=country, continent=continent, type=type, citations=citations, works=works)
        return tools.entity_list(
            "institution",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            cursor=cursor,
            sample=sample,
            seed=seed,
            aliases=aliases,
        )

    @mcp.tool(name="topic_list", description="List research topics.", tags={"openalex", "topic"})
    def topic_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        cursor: str | None = None,
        sample: int | None = None,
        seed: int | None = None,
        domain: str | None = None,
        field: str | None = None,
        subfield: str | None = None,
        citations: str | None = None,
        works: str | None = None,
    ) -> str:
        aliases = dict(domain=domain, field=field, subfield=subfield, citations=citations, works=works)
        return tools.entity_list(
            "topic",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            cursor=cursor,
            sample=sample,
            seed=seed,
            aliases=aliases,
        )

    @mcp.tool(name="publisher_list", description="List publishers.", tags={"openalex", "publisher"})
    def publisher_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        cursor: str | None = None,
        sample: int | None = None,
        seed: int | None = None,
        country: str | None = None,
        continent: str | None = None,
        citations: str | None = None,
        works: str | None = None,
    ) -> str:
        aliases = dict(country=country, continent=continent, citations=citations, works=works)
        return tools.entity_list(
            "publisher",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            cursor=cursor,
            sample=sample,
            seed=seed,
            aliases=aliases,
        )

    @mcp.tool(name="funder_list", description="List research funders.", tags={"openalex", "funder"})
    def funder_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        cursor: str | None = None,
        sample: int | None = None,
        seed: int | None = None,
        country: str | None = None,
        continent: str | None = None,
        citations: str | None = None,
        works: str | None = None,
    ) -> str:
        aliases = dict(country=country, continent=continent, citations=citations, works=works)
        return tools.entity_list(
            "funder",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            cursor=cursor,
            sample=sample,
            seed=seed,
            aliases=aliases,
        )

    @mcp.tool(name="domain_list", description="List the top-level research domains.", tags={"openalex", "domain"})
    def domain_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        works: str | None = None,
    ) -> str:
        return tools.entity_list(
            "domain",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            aliases=dict(works=works),
        )

    @mcp.tool(name="field_list", description="List research fields.", tags={"openalex", "field"})
    def field_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        domain: str | None = None,
        works: str | None = None,
    ) -> str:
        return tools.entity_list(
            "field",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            aliases=dict(domain=domain, works=works),
        )

    @mcp.tool(name="subfield_list", description="List research subfields.", tags={"openalex", "subfield"})
    def subfield_list(
        search: str | None = None,
        filter: str | None = None,
        sort: str | None = None,
        per_page: int = 10,
        page: int | None = None,
        domain: str | None = None,
        field: str | None = None,
        works: str | None = None,
    ) -> str:
        return tools.entity_list(
            "subfield",
            search=search,
            filter=filter,
            sort=sort,
            per_page=per_page,
            page=page,
            aliases=dict(domain=domain, field=field, works=works),
        )


def _register_openalex_lookup_tools(mcp: FastMCP, tools: PaperTools, kind: EntityKind) -> None:
    def get_tool(id: str, select: str | None = None) -> str:
        return tools.entity_get(kind.name, id, select=select)

    mcp.tool(
        name=f"{kind.name}_get",
        description=(
            f"Get one of the OpenAlex {kind.path} by OpenAlex ID, external ID (DOI, ORCID, ROR, ISSN) "
            "or name. Returns the full record."
        ),
        tags={"openalex", kind.name},
    )(get_tool)

    if kind.autocomplete:

        def autocomplete_tool(q: str) -> str:
            return tools.entity_autocomplete(kind.name, q)

        mcp.tool(
            name=f"{kind.name}_autocomplete",
            description=f"Type-ahead search over OpenAlex {kind.path}; fast way to find IDs.",
            tags={"openalex", kind.name},
        )(autocomplete_tool)


def _register_zotero_tools(mcp: FastMCP, tools: PaperTools) -> None:
    @mcp.tool(name="zotero_item_list", description="List items in the Zotero library.", tags={"zotero"})
    def zotero_item_list(
        search: str | None = None,
        everything: bool = False,
        tag: str | None = None,
        item_type: str | None = None,
        collection: str | None = None,
        top: bool = False,
        sort: str | None = None,
        direction: str | None = None,
        limit: int = 25,
        start: int | None = None,
    ) -> str:
        """List Zotero items.

        Args:
            search: Quick search (title, creator, year).
            everything: Search all fields including full text.
            tag: Tag filter; "a || b" for OR, "-a" to exclude.
            item_type: Item type, e.g. "journalArticle" or "-attachment".
            collection: Collection key or part of its name.
            top: Top-level items only.
        """
        return tools.zotero_item_list(
            search=search,
            everything=everything,
            tag=tag,
            item_type=item_type,
            collection=collection,
            top=top,
            sort=sort,
            direction=direction,
            limit=limit,
            start=start,
        )

    @mcp.tool(name="zotero_item_get", description="Get a Zotero item by key or title.", tags={"zotero"})
    def zotero_item_get(key: str) -> str:
        return tools.zotero_item_get(key)

    @mcp.tool(name="zotero_item_children", description="Attachments and notes of a Zotero item.", tags={"zotero"})
    def zotero_item_children(key: str) -> str:
        return tools.zotero_item_children(key)

    @mcp.tool(name="zotero_item_fulltext", description="Indexed full text of a Zotero attachment.", tags={"zotero"})
    def zotero_item_fulltext(key: str) -> str:
        return tools.zotero_item_fulltext(key)

    @mcp.tool(name="zotero_collection_list", description="List Zotero collections.", tags={"zotero"})
    def zotero_collection_list(top: bool = False, limit: int = 100, start: int | None = None) -> str:
        return tools.zotero_collection_list(top=top, limit=limit, start=start)

    @mcp.tool(
        name="zotero_collection_items",
        description="List items in a Zotero collection given its key or name.",
        tags={"zotero"},
    )
    def zotero_collection_items(collection: str, top: bool = False, limit: int = 25) -> str:
        return tools.zotero_collection_items(collection, top=top, limit=limit)

    @mcp.tool(name="zotero_search_list", description="List saved searches.", tags={"zotero"})
    def zotero_search_list() -> str:
        return tools.zotero_search_list()

    @mcp.tool(name="zotero_tag_list", description="List tags, optionally of one item.", tags={"zotero"})
    def zotero_tag_list(search: str | None = None, item: str | None = None, limit: int = 50) -> str:
        return tools.zotero_tag_list(search=search, item=item, limit=limit)


def create_server(config: AppConfig, tools: PaperTools | None = None) -> FastMCP:
    """Build the FastMCP server with every tool registered.

    Args:
        config: Application configuration.
        tools: Tool implementations; built from ``config`` when omitted.

    Returns:
        Server ready to ``run()``.
    """
    tools = tools or PaperTools(config)
    mcp = FastMCP(name="PaperQuery", instructions=INSTRUCTIONS)

    _register_openalex_list_tools(mcp, tools)
    for kind in ENTITY_KINDS:
        _register_openalex_lookup_tools(mcp, tools, kind)

    @mcp.tool(
        name="work_find",
        description="Semantic search for works similar to a text passage. Requires an OpenAlex API key.",
        tags={"openalex", "work"},
    )
    def work_find(query: str, count: int | None = None, filter: str | None = None) -> str:
        return tools.work_find(query, count=count, filter=filter)

    @mcp.tool(
        name="work_text",
        description=(
            "Full text of a work extracted from its PDF. Tries the Zotero library, then "
            "open-access PDF links, then the OpenAlex content API."
        ),
        tags={"openalex", "work"},
    )
    def work_text(id: str) -> str:
        """Extract a work's text.

        Args:
            id: OpenAlex work ID, DOI or exact title.
        """
        return tools.work_text(id)

    _register_zotero_tools(mcp, tools)
    return mcp


@click.command(help="Run the PaperQuery MCP server.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False, exists=True),
    envvar="PAPER_QUERY_CONFIG",
    default=None,
    help="YAML file layered over the built-in defaults.",
)
@click.option("--transport", type=click.Choice(["stdio", "http"]), default="stdio", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True, help="Port for the http transport.")
def main(config_path: Path | None, transport: str, port: int) -> None:
    """Entry point for the ``paper-query-mcp`` console script."""
    load_dotenv()
    config = load_config(config_path)
    configure_logging(
        level=config.runtime.console_level("mcp"),
        action="mcp",
        log_to_file=config.runtime.to_file,
        log_dir=config.runtime.dir,
        file_level=config.runtime.file_level,
    )
    server = create_server(config)
    if transport == "http":
        log.info("Starting MCP server on port %d", port)
        server.run(transport="http", port=port)
    else:
        server.run()
