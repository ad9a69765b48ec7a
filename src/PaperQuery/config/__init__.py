from __future__ import annotations

"""Public configuration API for PaperQuery."""

from PaperQuery.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
    parse_yaml,
)
from PaperQuery.config.cache import CacheConfig
from PaperQuery.config.openalex import OpenAlexConfig
from PaperQuery.config.runtime import RuntimeConfig
from PaperQuery.config.zotero import ZoteroConfig

__all__ = [
    "RuntimeConfig",
    "OpenAlexConfig",
    "ZoteroConfig",
    "CacheConfig",
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
    "parse_yaml",
]
