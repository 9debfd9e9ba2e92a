"""
Dumper configuration management.

This module handles loading dumper settings from pyproject.toml and
environment variables with proper precedence and validation.
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import Any

from schemadump.parser.shared.constants import DEFAULT_INDENT, ENV_PREFIX
from schemadump.parser.shared.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class DumperConfig:
    """Settings for one schema dump."""

    # fnmatch patterns of tables to leave out of the dump
    ignore_tables: list[str] = field(default_factory=list)

    # Raise on table body lines no statement rule recognises
    strict_statements: bool = False

    # Database schema read by database backed generators
    schema: str | None = None

    # Spaces before top level statements
    indent: int = DEFAULT_INDENT

    def is_ignored(self, table_name: str) -> bool:
        """Check whether a table matches one of the ignore patterns."""
        return any(fnmatch(table_name, pattern) for pattern in self.ignore_tables)


class DumperConfigManager:
    """Manages dumper configuration from multiple sources."""

    # Map environment variables to config keys
    ENV_MAPPINGS = {
        f"{ENV_PREFIX}IGNORE_TABLES": "ignore_tables",
        f"{ENV_PREFIX}STRICT_STATEMENTS": "strict_statements",
        f"{ENV_PREFIX}SCHEMA": "schema",
        f"{ENV_PREFIX}INDENT": "indent",
    }

    def __init__(self, project_root: str | Path | None = None) -> None:
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.logger = logging.getLogger(self.__class__.__name__)

    def load_config(self) -> DumperConfig:
        """
        Load configuration from pyproject.toml and environment variables.

        Returns:
            DumperConfig with environment values overriding file values

        Raises:
            ConfigurationError: If a setting has an invalid value
        """
        toml_config = self._load_toml_config()
        env_config = self._load_env_config()

        # Merge configurations (env vars override toml)
        merged = toml_config.copy()
        merged.update(env_config)
        return self._create_config(merged)

    def _load_toml_config(self) -> dict[str, Any]:
        """Load the [tool.schemadump] table from pyproject.toml."""
        toml_file = self.project_root / "pyproject.toml"
        if not toml_file.exists():
            self.logger.debug("No pyproject.toml found")
            return {}

        try:
            with open(toml_file, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Could not read {toml_file}: {e}") from e

        config = data.get("tool", {}).get("schemadump", {})
        if not isinstance(config, dict):
            raise ConfigurationError("[tool.schemadump] must be a table")
        if not config:
            self.logger.debug(f"No [tool.schemadump] configuration in {toml_file}")
        return dict(config)

    def _load_env_config(self) -> dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: dict[str, Any] = {}
        for env_var, config_key in self.ENV_MAPPINGS.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            if config_key == "ignore_tables":
                env_config[config_key] = [item.strip() for item in value.split(",") if item.strip()]
            elif config_key == "strict_statements":
                env_config[config_key] = _parse_bool(env_var, value)
            else:
                env_config[config_key] = value
        return env_config

    def _create_config(self, config_dict: dict[str, Any]) -> DumperConfig:
        """Validate raw settings and build a DumperConfig."""
        unknown = set(config_dict) - set(self.ENV_MAPPINGS.values())
        if unknown:
            self.logger.warning(f"Ignoring unknown schemadump settings: {sorted(unknown)}")

        ignore_tables = config_dict.get("ignore_tables", [])
        if isinstance(ignore_tables, str):
            ignore_tables = [ignore_tables]
        if not isinstance(ignore_tables, list) or not all(isinstance(p, str) for p in ignore_tables):
            raise ConfigurationError("ignore_tables must be a list of table name patterns")

        strict = config_dict.get("strict_statements", False)
        if isinstance(strict, str):
            strict = _parse_bool("strict_statements", strict)
        if not isinstance(strict, bool):
            raise ConfigurationError("strict_statements must be a boolean")

        try:
            indent = int(config_dict.get("indent", DEFAULT_INDENT))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"indent must be an integer: {e}") from e
        if indent < 0:
            raise ConfigurationError("indent must not be negative")

        schema = config_dict.get("schema")
        return DumperConfig(
            ignore_tables=list(ignore_tables),
            strict_statements=strict,
            schema=str(schema) if schema is not None else None,
            indent=indent,
        )


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got '{value}'")
