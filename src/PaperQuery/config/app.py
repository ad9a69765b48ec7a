from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from PaperQuery.config.cache import CacheConfig, check_cache, load_cache
from PaperQuery.config.openalex import OpenAlexConfig, check_openalex, load_openalex
from PaperQuery.config.runtime import RuntimeConfig, check_runtime, load_runtime
from PaperQuery.config.zotero import ZoteroConfig, check_zotero, load_zotero

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    openalex: OpenAlexConfig
    zotero: ZoteroConfig
    cache: CacheConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse a fully merged mapping into AppConfig."""
    runtime = load_runtime(raw)
    openalex = load_openalex(raw)
    zotero = load_zotero(raw)
    cache = load_cache(raw)

    check_runtime(runtime)
    check_openalex(openalex)
    check_zotero(zotero)
    check_cache(cache)

    return AppConfig(
        runtime=runtime,
        openalex=openalex,
        zotero=zotero,
        cache=cache,
    )


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load packaged defaults, layering an optional user file on top.

    Args:
        config_path: Optional YAML override file.

    Returns:
        Validated application configuration.
    """
    return load_config_with_defaults(config_path, default_path=DEFAULT_CONFIG_PATH)


def load_config_with_defaults(config_path: Path | None, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load config by merging defaults and optional override."""
    base = parse_yaml(default_path.read_text(encoding="utf-8"))
    if config_path is None or config_path == default_path:
        return parse_config_dict(base)
    override = parse_yaml(config_path.read_text(encoding="utf-8"))
    return parse_config_dict(merge_config_dicts(base, override))


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
