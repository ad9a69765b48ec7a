"""Click CLI interface definitions.

Builds one command group per OpenAlex entity kind (``list``, ``get`` and,
where supported, ``autocomplete``; works add ``find`` and ``text``) plus the
``zotero`` group, and routes every command through :class:`CommandRunner`.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Any, Callable

import click
from dotenv import load_dotenv

from PaperQuery.cli import commands
from PaperQuery.cli.runner import CommandRunner
from PaperQuery.config import AppConfig, load_config
from PaperQuery.core.aliases import AliasKind, AliasSpec, aliases_for
from PaperQuery.core.entities import ENTITY_KINDS, WORK, EntityKind
from PaperQuery.openalex.params import ListParams
from PaperQuery.zotero.params import CollectionListParams, ItemListParams, TagListParams

_json_option = click.option("--json", "as_json", is_flag=True, help="Print raw JSON instead of text.")


@click.group(help="PaperQuery: search OpenAlex and your Zotero library from the terminal.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False, exists=True),
    envvar="PAPER_QUERY_CONFIG",
    default=None,
    help="YAML file layered over the built-in defaults.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """CLI entry group.

    Loads environment variables from a .env file before reading config so
    API keys referenced by ``*_env`` settings are visible.
    """
    load_dotenv()
    try:
        ctx.obj = load_config(config_path)
    except (OSError, TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid config: {e}") from e


def _alias_option(spec: AliasSpec) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    flag = f"--{spec.name.replace('_', '-')}"
    if spec.kind is AliasKind.BOOLEAN:
        return click.option(flag, spec.name, is_flag=True, default=False, help=spec.description)
    return click.option(flag, spec.name, default=None, metavar="VALUE", help=spec.description)


def _alias_options(kind: EntityKind) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorate(fn: Callable[..., Any]) -> Callable[..., Any]:
        for spec in reversed(aliases_for(kind)):
            fn = _alias_option(spec)(fn)
        return fn

    return decorate


def _make_entity_group(kind: EntityKind) -> click.Group:
    group = click.Group(name=kind.name, help=f"Query OpenAlex {kind.path}.")

    @group.command("list", help=f"List {kind.path}. Alias options are resolved into --filter.")
    @click.option("-s", "--search", default=None, help="Full-text search.")
    @click.option("-f", "--filter", "filter_expr", default=None, help="Raw OpenAlex filter expression.")
    @click.option("--sort", default=None, help="Sort expression, e.g. cited_by_count:desc.")
    @click.option("-n", "--per-page", type=click.IntRange(1, 200), default=10, show_default=True)
    @click.option("--page", type=click.IntRange(min=1), default=None)
    @click.option("--cursor", default=None, help="Cursor pagination; '*' starts a walk.")
    @click.option("--sample", type=click.IntRange(min=1), default=None, help="Random sample size.")
    @click.option("--seed", type=int, default=None, help="Seed for --sample.")
    @_alias_options(kind)
    @_json_option
    @click.pass_obj
    def list_cmd(
        cfg: AppConfig,
        search: str | None,
        filter_expr: str | None,
        sort: str | None,
        per_page: int,
        page: int | None,
        cursor: str | None,
        sample: int | None,
        seed: int | None,
        as_json: bool,
        **aliases: Any,
    ) -> None:
        params = ListParams(
            filter=filter_expr,
            search=search,
            sort=sort,
            per_page=per_page,
            page=page,
            cursor=cursor,
            sample=sample,
            seed=seed,
        )
        CommandRunner(cfg).run_openalex(
            f"{kind.name}-list",
            partial(commands.list_entities, kind=kind, params=params, aliases=aliases, as_json=as_json),
        )

    @group.command("get", help=f"Get one of the {kind.path} by ID, external ID or name.")
    @click.argument("identifier")
    @click.option("--select", default=None, help="Comma-separated fields to return.")
    @_json_option
    @click.pass_obj
    def get_cmd(cfg: AppConfig, identifier: str, select: str | None, as_json: bool) -> None:
        CommandRunner(cfg).run_openalex(
            f"{kind.name}-get",
            partial(commands.get_entity, kind=kind, identifier=identifier, select=select, as_json=as_json),
        )

    if kind.autocomplete:

        @group.command("autocomplete", help=f"Type-ahead search over {kind.path}.")
        @click.argument("query")
        @_json_option
        @click.pass_obj
        def autocomplete_cmd(cfg: AppConfig, query: str, as_json: bool) -> None:
            CommandRunner(cfg).run_openalex(
                f"{kind.name}-autocomplete",
                partial(commands.autocomplete, kind=kind, query=query, as_json=as_json),
            )

    if kind is WORK:

        @group.command("find", help="Semantic search over works (needs an OpenAlex API key).")
        @click.argument("query")
        @click.option("-n", "--count", type=click.IntRange(1, 100), default=None)
        @click.option("-f", "--filter", "filter_expr", default=None, help="Raw OpenAlex filter expression.")
        @_json_option
        @click.pass_obj
        def find_cmd(cfg: AppConfig, query: str, count: int | None, filter_expr: str | None, as_json: bool) -> None:
            CommandRunner(cfg).run_openalex(
                "work-find",
                partial(commands.find_works, query=query, count=count, filter_expr=filter_expr, as_json=as_json),
            )

        @group.command(
            "text",
            help="Extract the full text of a work from its PDF (Zotero, open-access links, OpenAlex content).",
        )
        @click.argument("identifier")
        @_json_option
        @click.pass_obj
        def text_cmd(cfg: AppConfig, identifier: str, as_json: bool) -> None:
            CommandRunner(cfg).run_work_text(
                "work-text",
                partial(commands.work_text, identifier=identifier, as_json=as_json),
            )

    return group


for _kind in ENTITY_KINDS:
    cli.add_command(_make_entity_group(_kind))


@cli.group("zotero", help="Browse your Zotero library (needs ZOTERO_USER_ID and ZOTERO_API_KEY).")
def zotero_group() -> None:
    """Zotero command group."""


@zotero_group.group("item", help="Library items.")
def zotero_item_group() -> None:
    """Zotero item commands."""


@zotero_item_group.command("list")
@click.option("-s", "--search", "q", default=None, help="Quick search (title, creator, year).")
@click.option("--everything", is_flag=True, help="Search all fields including full text.")
@click.option("--tag", default=None, help="Tag filter; 'a || b' for OR, '-a' to exclude.")
@click.option("--type", "item_type", default=None, help="Item type, e.g. journalArticle or -attachment.")
@click.option("--collection", default=None, help="Collection key or part of its name.")
@click.option("--top", is_flag=True, help="Top-level items only.")
@click.option("--trash", is_flag=True, help="Items in the trash.")
@click.option("--sort", default=None, help="Sort field, e.g. dateModified.")
@click.option("--direction", type=click.Choice(["asc", "desc"]), default=None)
@click.option("-n", "--limit", type=click.IntRange(1, 100), default=25, show_default=True)
@click.option("--start", type=click.IntRange(min=0), default=None)
@_json_option
@click.pass_obj
def zotero_item_list(
    cfg: AppConfig,
    q: str | None,
    everything: bool,
    tag: str | None,
    item_type: str | None,
    collection: str | None,
    top: bool,
    trash: bool,
    sort: str | None,
    direction: str | None,
    limit: int,
    start: int | None,
    as_json: bool,
) -> None:
    params = ItemListParams(
        q=q,
        qmode="everything" if everything else None,
        tag=tag,
        item_type=item_type,
        sort=sort,
        direction=direction,
        limit=limit,
        start=start,
    )
    CommandRunner(cfg).run_zotero(
        "zotero-item-list",
        lambda service: commands.zotero_page(
            service.list_items(params, top=top, trash=trash, collection=collection),
            "items",
            as_json=as_json,
        ),
    )


@zotero_item_group.command("get")
@click.argument("key_or_title")
@_json_option
@click.pass_obj
def zotero_item_get(cfg: AppConfig, key_or_title: str, as_json: bool) -> None:
    CommandRunner(cfg).run_zotero(
        "zotero-item-get",
        partial(commands.zotero_item, value=key_or_title, as_json=as_json),
    )


@zotero_item_group.command("children", help="Attachments and notes of an item.")
@click.argument("key_or_title")
@_json_option
@click.pass_obj
def zotero_item_children(cfg: AppConfig, key_or_title: str, as_json: bool) -> None:
    CommandRunner(cfg).run_zotero(
        "zotero-item-children",
        lambda service: commands.zotero_page(service.item_children(key_or_title), "children", as_json=as_json),
    )


@zotero_item_group.command("fulltext", help="Indexed full text of an attachment.")
@click.argument("key_or_title")
@_json_option
@click.pass_obj
def zotero_item_fulltext(cfg: AppConfig, key_or_title: str, as_json: bool) -> None:
    CommandRunner(cfg).run_zotero(
        "zotero-item-fulltext",
        partial(commands.zotero_fulltext, value=key_or_title, as_json=as_json),
    )


@zotero_group.group("collection", help="Collections.")
def zotero_collection_group() -> None:
    """Zotero collection commands."""


@zotero_collection_group.command("list")
@click.option("--top", is_flag=True, help="Top-level collections only.")
@click.option("-n", "--limit", type=click.IntRange(1, 100), default=100, show_default=True)
@click.option("--start", type=click.IntRange(min=0), default=None)
@_json_option
@click.pass_obj
def zotero_collection_list(cfg: AppConfig, top: bool, limit: int, start: int | None, as_json: bool) -> None:
    params = CollectionListParams(limit=limit, start=start)
    CommandRunner(cfg).run_zotero(
        "zotero-collection-list",
        lambda service: commands.zotero_page(service.list_collections(params, top=top), "collections", as_json=as_json),
    )


@zotero_collection_group.command("get")
@click.argument("key_or_name")
@_json_option
@click.pass_obj
def zotero_collection_get(cfg: AppConfig, key_or_name: str, as_json: bool) -> None:
    CommandRunner(cfg).run_zotero(
        "zotero-collection-get",
        partial(commands.zotero_collection, value=key_or_name, as_json=as_json),
    )


@zotero_collection_group.command("items", help="Items in a collection.")
@click.argument("key_or_name")
@click.option("--top", is_flag=True, help="Top-level items only.")
@click.option("-n", "--limit", type=click.IntRange(1, 100), default=25, show_default=True)
@_json_option
@click.pass_obj
def zotero_collection_items(cfg: AppConfig, key_or_name: str, top: bool, limit: int, as_json: bool) -> None:
    params = ItemListParams(limit=limit)
    CommandRunner(cfg).run_zotero(
        "zotero-collection-items",
        lambda service: commands.zotero_page(
            service.list_items(params, top=top, collection=key_or_name), "items", as_json=as_json
        ),
    )


@zotero_group.group("search", help="Saved searches.")
def zotero_search_group() -> None:
    """Zotero saved-search commands."""


@zotero_search_group.command("list")
@_json_option
@click.pass_obj
def zotero_search_list(cfg: AppConfig, as_json: bool) -> None:
    CommandRunner(cfg).run_zotero(
        "zotero-search-list",
        lambda service: commands.zotero_page(service.list_searches(), "saved searches", as_json=as_json),
    )


@zotero_group.group("tag", help="Tags.")
def zotero_tag_group() -> None:
    """Zotero tag commands."""


@zotero_tag_group.command("list")
@click.option("-s", "--search", "q", default=None, help="Tag name filter.")
@click.option("--item", default=None, help="Only tags of this item (key or title).")
@click.option("-n", "--limit", type=click.IntRange(1, 100), default=50, show_default=True)
@_json_option
@click.pass_obj
def zotero_tag_list(cfg: AppConfig, q: str | None, item: str | None, limit: int, as_json: bool) -> None:
    params = TagListParams(q=q, limit=limit)
    CommandRunner(cfg).run_zotero(
        "zotero-tag-list",
        lambda service: commands.zotero_page(service.list_tags(params, item=item), "tags", as_json=as_json),
    )


@zotero_group.group("group", help="Group libraries you belong to.")
def zotero_groups_group() -> None:
    """Zotero group commands."""


@zotero_groups_group.command("list")
@_json_option
@click.pass_obj
def zotero_group_list(cfg: AppConfig, as_json: bool) -> None:
    CommandRunner(cfg).run_zotero(
        "zotero-group-list",
        lambda service: commands.zotero_page(service.list_groups(), "groups", as_json=as_json),
    )
