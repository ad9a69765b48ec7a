"""Application services for PaperQuery.

Wraps the API clients with alias resolution, name lookups and response
slimming, and provides factory functions for component creation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from PaperQuery.services.openalex import OpenAlexService
from PaperQuery.services.text import WorkTextService
from PaperQuery.services.zotero import ZoteroService
from PaperQuery.utils.log import log

if TYPE_CHECKING:
    from PaperQuery.config import AppConfig


def create_openalex_service(config: AppConfig) -> OpenAlexService:
    """Create the OpenAlex service with the configured client and cache.

    Args:
        config: Application configuration.

    Returns:
        Configured OpenAlexService instance.
    """
    from PaperQuery.openalex.client import OpenAlexClient
    from PaperQuery.storage.cache import DiskCache

    cache = None
    if config.cache.enabled:
        cache = DiskCache(config.cache.dir, ttl=config.cache.ttl_seconds)
        log.debug("Request cache enabled: %s", config.cache.dir)
    client = OpenAlexClient(
        base_url=config.openalex.base_url,
        api_key=config.openalex.api_key,
        mailto=config.openalex.mailto,
        timeout=config.openalex.timeout,
        cache=cache,
    )
    return OpenAlexService(client=client, max_workers=config.openalex.resolve_workers)


def create_zotero_service(config: AppConfig) -> ZoteroService:
    """Create the Zotero service, preferring the local API when configured.

    Raises:
        ValueError: If the user ID (or, for the web API, the API key) is missing.
    """
    from PaperQuery.zotero.client import ZoteroClient, local_api_available

    zotero = config.zotero
    if not zotero.user_id:
        raise ValueError(f"{zotero.user_id_env or 'zotero user id'} environment variable not set")
    if zotero.prefer_local and local_api_available(zotero.user_id, base_url=zotero.local_url):
        log.debug("Using Zotero local API at %s", zotero.local_url)
        client = ZoteroClient(zotero.user_id, zotero.api_key, base_url=zotero.local_url, timeout=zotero.timeout)
        return ZoteroService(client=client)
    if not zotero.api_key:
        raise ValueError(f"{zotero.api_key_env or 'zotero api key'} environment variable not set")
    client = ZoteroClient(zotero.user_id, zotero.api_key, base_url=zotero.base_url, timeout=zotero.timeout)
    return ZoteroService(client=client)


def create_work_text_service(
    config: AppConfig,
    *,
    openalex: OpenAlexService | None = None,
    zotero: ZoteroService | None = None,
) -> WorkTextService:
    """Create the work text service on top of the OpenAlex and Zotero services.

    Zotero is optional here: without credentials the library is skipped and
    only open-access links and the OpenAlex content API are tried.

    Args:
        config: Application configuration.
        openalex: Existing OpenAlex service to share; created when omitted.
        zotero: Existing Zotero service to share; created when omitted.
    """
    openalex = openalex or create_openalex_service(config)
    if zotero is None:
        try:
            zotero = create_zotero_service(config)
        except ValueError as error:
            log.info("Zotero library skipped for work text: %s", error)
    return WorkTextService(
        openalex=openalex,
        zotero=zotero.client if zotero is not None else None,
        cache=openalex.client.cache,
        zotero_data_dir=config.zotero.data_dir,
        timeout=config.openalex.timeout,
    )


__all__ = [
    "OpenAlexService",
    "WorkTextService",
    "ZoteroService",
    "create_openalex_service",
    "create_work_text_service",
    "create_zotero_service",
]
