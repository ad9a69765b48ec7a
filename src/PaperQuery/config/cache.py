"""Request cache domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from PaperQuery.config.common import (
    expect_bool,
    expect_int,
    expect_str,
    get_required_value,
    get_section,
)


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Store validated disk cache settings."""

    enabled: bool
    dir: Path
    ttl_seconds: int


def load_cache(raw: Mapping[str, Any]) -> CacheConfig:
    """Load the ``cache`` section; ``~`` in ``cache.dir`` is expanded.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "cache")
    directory = expect_str(get_required_value(section, "dir", "cache.dir"), "cache.dir")
    return CacheConfig(
        enabled=expect_bool(get_required_value(section, "enabled", "cache.enabled"), "cache.enabled"),
        dir=Path(directory).expanduser(),
        ttl_seconds=expect_int(get_required_value(section, "ttl_seconds", "cache.ttl_seconds"), "cache.ttl_seconds"),
    )


def check_cache(config: CacheConfig) -> None:
    """Validate cache domain constraints.

    Raises:
        ValueError: If values violate cache constraints.
    """
    if config.enabled and not str(config.dir).strip():
        raise ValueError("cache.dir must not be empty when cache.enabled=true")
    if config.ttl_seconds <= 0:
        raise ValueError("cache.ttl_seconds must be > 0")
