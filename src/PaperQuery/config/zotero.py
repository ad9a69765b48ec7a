"""Zotero domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from PaperQuery.config.common import (
    expect_bool,
    expect_float,
    expect_optional_str,
    expect_str,
    get_required_value,
    get_section,
    read_env,
)


@dataclass(frozen=True, slots=True)
class ZoteroConfig:
    """Store validated Zotero client settings.

    ``user_id`` and ``api_key`` are read from the environment variables
    named by ``user_id_env`` and ``api_key_env``; both may be absent until a
    Zotero command actually needs them. ``data_dir`` is the desktop data
    directory whose ``storage/`` holds attachment files; None skips local
    attachment reads.
    """

    base_url: str
    local_url: str
    prefer_local: bool
    user_id_env: str | None
    user_id: str | None
    api_key_env: str | None
    api_key: str | None
    timeout: float
    data_dir: Path | None


def load_zotero(raw: Mapping[str, Any]) -> ZoteroConfig:
    """Load the ``zotero`` section.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed Zotero configuration.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "zotero")
    user_id_env = expect_optional_str(section.get("user_id_env"), "zotero.user_id_env")
    api_key_env = expect_optional_str(section.get("api_key_env"), "zotero.api_key_env")
    data_dir = expect_optional_str(section.get("data_dir"), "zotero.data_dir")
    return ZoteroConfig(
        base_url=expect_str(get_required_value(section, "base_url", "zotero.base_url"), "zotero.base_url").rstrip("/"),
        local_url=expect_str(
            get_required_value(section, "local_url", "zotero.local_url"), "zotero.local_url"
        ).rstrip("/"),
        prefer_local=expect_bool(
            get_required_value(section, "prefer_local", "zotero.prefer_local"), "zotero.prefer_local"
        ),
        user_id_env=user_id_env,
        user_id=read_env(user_id_env),
        api_key_env=api_key_env,
        api_key=read_env(api_key_env),
        timeout=expect_float(get_required_value(section, "timeout", "zotero.timeout"), "zotero.timeout"),
        data_dir=Path(data_dir).expanduser() if data_dir else None,
    )


def check_zotero(config: ZoteroConfig) -> None:
    """Validate Zotero domain constraints.

    Credentials are not checked here; the client factory reports them
    missing only when a Zotero command runs.

    Raises:
        ValueError: If values violate Zotero constraints.
    """
    for key, url in (("zotero.base_url", config.base_url), ("zotero.local_url", config.local_url)):
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"{key} must be an http(s) URL")
    if config.timeout <= 0:
        raise ValueError("zotero.timeout must be > 0")
