from __future__ import annotations

"""Shared helpers for reading and type-checking config sections."""

import os
from typing import Any, Mapping


def get_section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """Return a mapping section from the root config.

    Every section is optional because the packaged defaults fill them in;
    a missing section therefore yields an empty mapping.

    Args:
        raw: Root configuration mapping.
        key: Section name.

    Returns:
        Section mapping.

    Raises:
        TypeError: If the section is present but not a mapping.
    """
    section = raw.get(key)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{key} must be an object")
    return section


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    """Return a required field value from a section.

    Raises:
        ValueError: If the field is missing.
    """
    if field not in section:
        raise ValueError(f"Missing required config: {config_key}")
    return section[field]


def expect_str(value: Any, config_key: str) -> str:
    """Validate and return string value."""
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string")
    return value


def expect_optional_str(value: Any, config_key: str) -> str | None:
    """Validate a string that may be null or blank; blank becomes None."""
    if value is None:
        return None
    text = expect_str(value, config_key).strip()
    return text or None


def expect_bool(value: Any, config_key: str) -> bool:
    """Validate and return boolean value."""
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be a boolean")
    return value


def expect_int(value: Any, config_key: str) -> int:
    """Validate and return integer value (excluding bool)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{config_key} must be an integer")
    return value


def expect_float(value: Any, config_key: str) -> float:
    """Validate and return float value from numeric input."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{config_key} must be a number")
    return float(value)


def read_env(name: str | None) -> str | None:
    """Read a secret from the environment variable named in config.

    Args:
        name: Environment variable name, or None when not configured.

    Returns:
        Stripped value, or None when unset or blank.
    """
    if not name:
        return None
    value = os.getenv(name, "").strip()
    return value or None
