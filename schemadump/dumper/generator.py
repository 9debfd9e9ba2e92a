"""
Interface between the dumper and the generators that write schema text.

A generator writes each phase of a schema dump to the stream it is given.
It never calls its own phase methods directly while dumping: it goes through
the ``phases`` object handed to ``dump`` and ``tables`` so that every phase
can be captured.
"""

from abc import ABC, abstractmethod
from typing import Any, Protocol, TextIO

from .config import DumperConfig


class DumpPhases(Protocol):
    """The phase entry points a generator drives during a dump."""

    def header(self) -> None: ...

    def extensions(self) -> None: ...

    def types(self) -> None: ...

    def tables(self) -> None: ...

    def table(self, name: str) -> None: ...

    def foreign_keys(self, name: str) -> None: ...

    def trailer(self) -> None: ...


class SchemaGenerator(ABC):
    """Abstract base class for schema text generators."""

    def __init__(self, config: DumperConfig | None = None):
        self.config = config or DumperConfig()
        self.connection: Any = None

    def dump(self, stream: TextIO, phases: DumpPhases) -> None:
        """
        Drive every phase of a dump in order.

        ``stream`` is the destination of the whole dump; subclasses that
        write to it directly bypass phase capture.
        """
        phases.header()
        phases.extensions()
        phases.types()
        phases.tables()
        phases.trailer()

    def tables(self, stream: TextIO, phases: DumpPhases) -> None:
        """Dump every table, then every table's foreign keys."""
        names = self.table_names()
        for name in names:
            phases.table(name)
        for name in names:
            phases.foreign_keys(name)

    def table_names(self) -> list[str]:
        """Names of the tables to dump, without ignored tables."""
        return [name for name in self.list_tables() if not self.ignored(name)]

    def ignored(self, table_name: str) -> bool:
        """Check whether a table is excluded from the dump."""
        return self.config.is_ignored(table_name)

    @abstractmethod
    def list_tables(self) -> list[str]:
        """All table names known to the data source."""
        pass

    @abstractmethod
    def header(self, stream: TextIO) -> None:
        pass

    def extensions(self, stream: TextIO) -> None:
        pass

    def types(self, stream: TextIO) -> None:
        pass

    @abstractmethod
    def table(self, name: str, stream: TextIO) -> None:
        pass

    def foreign_keys(self, name: str, stream: TextIO) -> None:
        pass

    @abstractmethod
    def trailer(self, stream: TextIO) -> None:
        pass
