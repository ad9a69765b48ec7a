"""Command runner for coordinating CLI execution.

Manages logging configuration, service lifecycle and error handling for
every command.
"""

from __future__ import annotations

from typing import Callable, TypeVar

import click

from PaperQuery.config import AppConfig
from PaperQuery.services import (
    OpenAlexService,
    WorkTextService,
    ZoteroService,
    create_openalex_service,
    create_work_text_service,
    create_zotero_service,
)
from PaperQuery.utils.log import configure_logging, log

T = TypeVar("T")


class CommandRunner:
    """Orchestrates one command: logging, service creation, output, cleanup."""

    def __init__(self, config: AppConfig) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
        """
        self.config = config

    def run_openalex(self, action: str, command: Callable[[OpenAlexService], str]) -> None:
        """Run a command against the OpenAlex service and print its output.

        Args:
            action: Command name used for log files and error messages.
            command: Callable producing the text to print.

        Raises:
            click.Abort: When the command fails.
        """
        self._run(action, create_openalex_service, command, lambda service: service.client.close())

    def run_zotero(self, action: str, command: Callable[[ZoteroService], str]) -> None:
        """Run a command against the Zotero service and print its output.

        Raises:
            click.Abort: When the command fails or credentials are missing.
        """
        self._run(action, create_zotero_service, command, lambda service: service.client.close())

    def run_work_text(self, action: str, command: Callable[[WorkTextService], str]) -> None:
        """Run a command against the work text service and print its output.

        Raises:
            click.Abort: When the command fails or no PDF is found.
        """
        self._run(action, create_work_text_service, command, lambda service: service.close())

    def _run(
        self,
        action: str,
        factory: Callable[[AppConfig], T],
        command: Callable[[T], str],
        close: Callable[[T], None],
    ) -> None:
        self._configure_logging(action)
        try:
            service = factory(self.config)
            try:
                output = command(service)
            finally:
                close(service)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action, e)
            raise click.Abort from e
        click.echo(output, nl=not output.endswith("\n"))

    def _configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.console_level("cli"),
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
            file_level=self.config.runtime.file_level,
        )
