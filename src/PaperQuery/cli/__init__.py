"""CLI package for PaperQuery command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "cli", "main"]

from PaperQuery.cli.runner import CommandRunner
from PaperQuery.cli.ui import cli


def main() -> None:
    """Run the PaperQuery CLI.

    Entry point referenced by the ``paper-query`` console script.
    """
    cli()
