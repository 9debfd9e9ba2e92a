"""
Command context for shared setup across CLI commands.
"""

import traceback

import typer

from schemadump.dumper.config import DumperConfig

from .utils import load_dumper_config, setup_logging


class CommandContext:
    """
    Shared context for CLI commands.

    Handles common setup: logging and dumper settings.
    """

    def __init__(
        self,
        verbose: bool = False,
        project_root: str | None = None,
        schema: str | None = None,
    ):
        """
        Initialize command context from parameters.

        Args:
            verbose: Enable verbose output
            project_root: Folder holding pyproject.toml with [tool.schemadump]
            schema: Database schema override
        """
        self.verbose = verbose
        setup_logging(self.verbose)

        self.project_root = project_root
        self.schema = schema
        self._config: DumperConfig | None = None

    @property
    def config(self) -> DumperConfig:
        """Dumper settings, loaded on first use."""
        if self._config is None:
            self._config = load_dumper_config(self.project_root, self.schema)
        return self._config

    def handle_error(self, error: Exception, show_traceback: bool | None = None) -> None:
        """
        Handle errors consistently across commands.

        Args:
            error: The exception that occurred
            show_traceback: Whether to show traceback (defaults to verbose mode)
        """
        if show_traceback is None:
            show_traceback = self.verbose

        error_prefix = typer.style("Error: ", fg=typer.colors.RED, bold=True)
        typer.echo(f"{error_prefix}{error}", err=True)
        if show_traceback:
            traceback.print_exc()
        raise typer.Exit(1)
