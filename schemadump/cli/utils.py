"""
CLI utility functions.

Pure, stateless utility functions used across CLI commands.
"""

import logging
from pathlib import Path

import typer

from schemadump.dumper.config import DumperConfig, DumperConfigManager


def setup_logging(verbose: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: If True, set logging level to DEBUG, otherwise WARNING
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s - %(name)s - %(message)s")


def load_dumper_config(project_root: str | None = None, schema: str | None = None) -> DumperConfig:
    """
    Load dumper settings for a command.

    Args:
        project_root: Folder holding pyproject.toml (defaults to the working directory)
        schema: Database schema given on the command line, overrides the settings

    Returns:
        DumperConfig for the command
    """
    config = DumperConfigManager(project_root).load_config()
    if schema:
        config.schema = schema
    return config


def write_output(text: str, output: str | None = None) -> None:
    """Write text to a file, or to stdout when no file is given."""
    if output is None:
        typer.echo(text, nl=False)
        return

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    typer.echo(f"Written to {output_path}", err=True)
