"""OpenAlex domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from PaperQuery.config.common import (
    expect_float,
    expect_int,
    expect_optional_str,
    expect_str,
    get_required_value,
    get_section,
    read_env,
)


@dataclass(frozen=True, slots=True)
class OpenAlexConfig:
    """Store validated OpenAlex client settings."""

    base_url: str
    api_key_env: str | None
    api_key: str | None
    mailto: str | None
    timeout: float
    resolve_workers: int


def load_openalex(raw: Mapping[str, Any]) -> OpenAlexConfig:
    """Load the ``openalex`` section.

    The API key itself never lives in YAML; ``api_key_env`` names the
    environment variable that holds it.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed OpenAlex configuration.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "openalex")
    api_key_env = expect_optional_str(section.get("api_key_env"), "openalex.api_key_env")
    return OpenAlexConfig(
        base_url=expect_str(
            get_required_value(section, "base_url", "openalex.base_url"), "openalex.base_url"
        ).rstrip("/"),
        api_key_env=api_key_env,
        api_key=read_env(api_key_env),
        mailto=expect_optional_str(section.get("mailto"), "openalex.mailto"),
        timeout=expect_float(get_required_value(section, "timeout", "openalex.timeout"), "openalex.timeout"),
        resolve_workers=expect_int(
            get_required_value(section, "resolve_workers", "openalex.resolve_workers"),
            "openalex.resolve_workers",
        ),
    )


def check_openalex(config: OpenAlexConfig) -> None:
    """Validate OpenAlex domain constraints.

    Raises:
        ValueError: If values violate OpenAlex constraints.
    """
    if not config.base_url.startswith(("http://", "https://")):
        raise ValueError("openalex.base_url must be an http(s) URL")
    if config.timeout <= 0:
        raise ValueError("openalex.timeout must be > 0")
    if config.resolve_workers < 1:
        raise ValueError("openalex.resolve_workers must be >= 1")
