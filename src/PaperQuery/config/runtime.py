"""Logging configuration for the CLI and the MCP server.

Both surfaces write diagnostics to stderr. The MCP server gets its own
console level because MCP clients surface the server's stderr to users;
``OFF`` silences the console entirely while keeping the optional log file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from PaperQuery.config.common import (
    expect_bool,
    expect_str,
    get_required_value,
    get_section,
)

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
CONSOLE_OFF = "OFF"

Surface = Literal["cli", "mcp"]


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Store validated logging settings per surface."""

    level: str
    mcp_level: str
    file_level: str
    to_file: bool
    dir: str

    def console_level(self, surface: Surface) -> str:
        """Return the stderr level for ``surface`` (may be ``OFF``)."""
        return self.mcp_level if surface == "mcp" else self.level


def _level(section: Mapping[str, Any], key: str) -> str:
    name = f"log.{key}"
    return expect_str(get_required_value(section, key, name), name).strip().upper()


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Load logging settings from the ``log`` section.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed logging configuration with upper-cased level names.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "log")
    return RuntimeConfig(
        level=_level(section, "level"),
        mcp_level=_level(section, "mcp_level"),
        file_level=_level(section, "file_level"),
        to_file=expect_bool(get_required_value(section, "to_file", "log.to_file"), "log.to_file"),
        dir=expect_str(get_required_value(section, "dir", "log.dir"), "log.dir"),
    )


def check_runtime(config: RuntimeConfig) -> None:
    """Validate logging constraints.

    Console levels accept ``OFF``; the file level does not, use
    ``to_file: false`` instead.

    Raises:
        ValueError: If a level name is unknown or the log dir is blank.
    """
    console_levels = (*_LEVELS, CONSOLE_OFF)
    for key, value in (("level", config.level), ("mcp_level", config.mcp_level)):
        if value not in console_levels:
            raise ValueError(f"log.{key} must be one of {list(console_levels)}")
    if config.file_level not in _LEVELS:
        raise ValueError(f"log.file_level must be one of {list(_LEVELS)}")
    if config.to_file and not config.dir.strip():
        raise ValueError("log.dir must not be empty when log.to_file is true")
