"""
Table dependency graph building and ordering.
"""

import logging
import re
from graphlib import TopologicalSorter
from typing import Any

from schemadump.typing.dump import SchemaDump

from ..parsers.literal_parser import LiteralParser, plain_name
from ..parsers.pattern_registry import NAME_PATTERN
from ..shared.exceptions import CircularDependencyError, OptionDecodeError
from ..shared.types import DependencyInfo, GraphCycles, TableOrder

logger = logging.getLogger(__name__)

FOREIGN_KEY_PATTERN = re.compile(
    rf"^add_foreign_key \s+ (?P<from_table>{NAME_PATTERN}) \s* , \s* (?P<to_table>{NAME_PATTERN})",
    re.X,
)


class TableDependencyGraph:
    """Builds the table dependency graph of a dump and orders its tables."""

    def __init__(self):
        self._literals = LiteralParser()

    def build_graph(self, dump: SchemaDump) -> dict[str, Any]:
        """
        Build the dependency graph of the tables in a dump.

        Edges come from ``add_foreign_key`` statements (in ``final`` or in a
        table's trailer), ``foreign_key: { to_table: ... }`` column options
        and explicit ``SchemaDump.depends`` declarations.

        Args:
            dump: Fully captured dump

        Returns:
            Dict with nodes, edges, dependencies, dependents, table_order and cycles
        """
        nodes = list(dump.tables)
        dependencies = self.extract_dependencies(dump)

        dependents: DependencyInfo = {node: [] for node in nodes}
        for node, deps in dependencies.items():
            for dep in deps:
                dependents[dep].append(node)

        # dep -> table (dependency direction)
        edges = [(dep, table) for table, deps in dependencies.items() for dep in deps]

        cycles = self._detect_cycles(dependencies)
        table_order = self._topological_sort(nodes, dependencies) if not cycles else []

        return {
            "nodes": nodes,
            "edges": edges,
            "dependencies": dependencies,
            "dependents": dependents,
            "table_order": table_order,
            "cycles": cycles,
        }

    def table_order(self, dump: SchemaDump) -> TableOrder:
        """
        Order the tables of a dump so every table follows its dependencies.

        Ties keep the order in which tables were discovered.

        Raises:
            CircularDependencyError: If the tables depend on each other in a cycle
        """
        graph = self.build_graph(dump)
        if graph["cycles"]:
            raise CircularDependencyError(graph["cycles"])
        return graph["table_order"]

    def extract_dependencies(self, dump: SchemaDump) -> DependencyInfo:
        """Map every table to the known tables it depends on."""
        aliases = {}
        for name, table in dump.tables.items():
            aliases[name] = name
            if table.pname:
                aliases.setdefault(table.pname, name)

        dependencies: DependencyInfo = {name: [] for name in dump.tables}

        def add(table: str, dependency: str) -> None:
            source = aliases.get(table)
            target = aliases.get(dependency)
            if source is None or target is None:
                logger.debug(f"Ignoring dependency on unknown table: {table} -> {dependency}")
                return
            if source != target and target not in dependencies[source]:
                dependencies[source].append(target)

        statements = list(dump.final)
        for table in dump.tables.values():
            statements.extend(table.trailer)
        for statement in statements:
            reference = self.parse_foreign_key(statement)
            if reference:
                add(*reference)

        for name, table in dump.tables.items():
            for column in table.columns:
                target = column.options.get("foreign_key")
                if isinstance(target, dict) and target.get("to_table"):
                    add(name, str(target["to_table"]))

        for name, deps in dump.dependencies.items():
            for dep in deps:
                add(name, dep)

        return dependencies

    def parse_foreign_key(self, statement: str) -> tuple[str, str] | None:
        """
        Extract ``(from_table, to_table)`` from an ``add_foreign_key`` statement.

        Returns:
            The table pair, or None if the statement is not a foreign key
        """
        match = FOREIGN_KEY_PATTERN.match(statement.strip())
        if match is None:
            return None
        try:
            from_table = plain_name(self._literals.parse_value(match.group("from_table")))
            to_table = plain_name(self._literals.parse_value(match.group("to_table")))
        except OptionDecodeError as e:
            logger.warning(f"Could not read table names from {statement!r}: {e}")
            return None
        return from_table, to_table

    def _detect_cycles(self, dependencies: DependencyInfo) -> GraphCycles:
        """
        Detect circular dependencies using DFS.

        The walk keeps its own stack, so chains of any length are handled.

        Args:
            dependencies: Dict mapping table -> list of dependencies

        Returns:
            List of cycles found (empty if no cycles)
        """
        visited = set()
        rec_stack = set()
        cycles = []

        for start in dependencies:
            if start in visited:
                continue

            visited.add(start)
            rec_stack.add(start)
            path = [start]
            pending = [iter(dependencies.get(start, []))]
            while pending:
                neighbor = next(pending[-1], None)
                if neighbor is None:
                    pending.pop()
                    rec_stack.remove(path.pop())
                elif neighbor in rec_stack:
                    # Found a cycle
                    cycles.append(path[path.index(neighbor) :] + [neighbor])
                elif neighbor not in visited:
                    visited.add(neighbor)
                    rec_stack.add(neighbor)
                    path.append(neighbor)
                    pending.append(iter(dependencies.get(neighbor, [])))

        return cycles

    def _topological_sort(self, nodes: list[str], dependencies: DependencyInfo) -> TableOrder:
        """
        Perform topological sort using graphlib.TopologicalSorter.

        Args:
            nodes: Tables in discovery order
            dependencies: Dict mapping table -> list of dependencies

        Returns:
            List of tables in dependency order (dependencies first)
        """
        position = {node: index for index, node in enumerate(nodes)}
        ts = TopologicalSorter()
        for node in nodes:
            ts.add(node, *dependencies.get(node, []))
        ts.prepare()

        # Always emit the earliest discovered ready table first
        order: TableOrder = []
        ready: list[str] = []
        while ts.is_active():
            ready.extend(ts.get_ready())
            ready.sort(key=position.__getitem__)
            node = ready.pop(0)
            order.append(node)
            ts.done(node)
        return order
