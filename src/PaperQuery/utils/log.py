"""PaperQuery logging utilities.

Provides a logger with a timestamp + abbreviated level prefix, and
centralizes logger initialization for the CLI and the MCP server.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Final


_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        """Format one log record with an abbreviated level.

        Args:
            record: Logging record.

        Returns:
            Formatted message string.
        """
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("PaperQuery")


def configure_logging(
    *,
    level: str = "WARNING",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
    file_level: str = "DEBUG",
) -> None:
    """Configure PaperQuery logger.

    Uses format: mm-dd HH:MM:SS [<LVL>] <message>
    where LVL is one of: DEBG/INFO/WARN/ERRO.

    Console output goes to stderr so stdout stays clean for command results
    and for the MCP stdio transport. A console level of ``OFF`` installs no
    stream handler.

    Args:
        level: Console logging level (e.g., INFO, DEBUG, OFF).
        action: Command name used to create the log file path.
        log_to_file: Whether to mirror logs to a file.
        log_dir: Base directory for log files.
        file_level: Level of records mirrored to the log file.
    """
    console_off = (level or "").upper() == "OFF"
    resolved_level = getattr(logging, (level or "WARNING").upper(), logging.WARNING)
    resolved_file_level = getattr(logging, (file_level or "DEBUG").upper(), logging.DEBUG)

    formatter = _AbbrevLevelFormatter(
        fmt="%(asctime)s [%(levelabbr)s] %(message)s",
        datefmt="%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []

    if not console_off:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setLevel(resolved_level)
        stream_handler.setFormatter(formatter)
        handlers.append(stream_handler)

    if log_to_file and action:
        timestamp = datetime.now().strftime("%m%d%H%M%S")
        action_dir = Path(log_dir or "log") / action
        action_dir.mkdir(parents=True, exist_ok=True)
        log_path = action_dir / f"{action}_{timestamp}.log"
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(resolved_file_level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    log.handlers.clear()
    for handler in handlers:
        log.addHandler(handler)
    levels = [handler.level for handler in handlers]
    log.setLevel(min(levels) if levels else logging.CRITICAL + 1)
    log.propagate = False
