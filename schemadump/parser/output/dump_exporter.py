"""
JSON / YAML export of captured schema dumps.
"""

import json
import logging
from pathlib import Path
from typing import Any, Literal

import yaml

from schemadump.typing.dump import SchemaDump, Table
from schemadump.typing.export import DumpExport, TableExport

from ..analysis.dependency_graph import TableDependencyGraph
from ..parsers.literal_parser import Lambda, Symbol, plain_name, render_value
from ..shared.constants import EXPORT_FORMATS
from ..shared.exceptions import OutputGenerationError
from ..shared.types import FilePath

# Configure logging
logger = logging.getLogger(__name__)


class DumpExporter:
    """Handles structured export of a captured dump."""

    def __init__(self, graph: TableDependencyGraph | None = None):
        self.graph = graph or TableDependencyGraph()

    def to_dict(self, dump: SchemaDump) -> DumpExport:
        """
        Convert a dump into plain JSON / YAML friendly data.

        Symbols become their names and lambdas their literal source.
        """
        graph = self.graph.build_graph(dump)
        return {
            "header": dump.header,
            "initial": list(dump.initial),
            "extensions": list(dump.extensions),
            "types": list(dump.types),
            "tables": [self._table_to_dict(table) for table in dump.tables.values()],
            "final": list(dump.final),
            "trailer": dump.trailer,
            "table_order": graph["table_order"],
            "cycles": graph["cycles"],
        }

    def render(self, dump: SchemaDump, format: Literal["json", "yaml"] = "json") -> str:
        """
        Render a dump as JSON or YAML text.

        Raises:
            OutputGenerationError: If the format is unknown or rendering fails
        """
        if format not in EXPORT_FORMATS:
            raise OutputGenerationError(
                f"Unsupported export format '{format}'. Must be one of: {', '.join(EXPORT_FORMATS)}"
            )
        try:
            data = self.to_dict(dump)
            if format == "yaml":
                return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
            return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        except Exception as e:
            raise OutputGenerationError(f"Failed to render schema dump: {e}") from e

    def export(
        self,
        dump: SchemaDump,
        output_file: FilePath,
        format: Literal["json", "yaml"] = "json",
    ) -> Path:
        """
        Export a dump to a file.

        Args:
            dump: Captured dump
            output_file: Destination path
            format: Output format ("json" or "yaml")

        Returns:
            Path to the exported file

        Raises:
            OutputGenerationError: If export fails
        """
        output_file = Path(output_file)
        content = self.render(dump, format)
        try:
            # Ensure output directory exists
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(content, encoding="utf-8")
        except OSError as e:
            raise OutputGenerationError(f"Failed to export schema dump to {output_file}: {e}") from e

        logger.info(f"Schema dump with {len(dump.tables)} tables exported to {output_file}")
        return output_file

    def _table_to_dict(self, table: Table) -> TableExport:
        if not table.is_structured:
            return {"name": table.name, "alt": table.alt}
        return {
            "name": table.name,
            "pname": table.pname,
            "options": table.options,
            "columns": [
                {
                    "name": column.name,
                    "type": column.type,
                    "options": _plain(column.options),
                    "comments": list(column.comments),
                }
                for column in table.columns
            ],
            "indexes": [
                {"name": index.name, "columns": list(index.columns), "options": _plain(index.options)}
                for index in table.indexes
            ],
            "trailer": list(table.trailer),
            "unmatched": list(table.unmatched),
        }


def _plain(value: Any) -> Any:
    if isinstance(value, Symbol):
        return plain_name(value)
    if isinstance(value, Lambda):
        return render_value(value)
    if isinstance(value, dict):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
