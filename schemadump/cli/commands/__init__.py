"""
CLI command implementations.
"""

from schemadump.cli.commands.duckdb_cmd import cmd_duckdb
from schemadump.cli.commands.inspect_cmd import cmd_inspect
from schemadump.cli.commands.reorder import cmd_reorder

__all__ = ["cmd_reorder", "cmd_inspect", "cmd_duckdb"]
