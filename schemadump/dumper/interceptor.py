"""
Phase interception for schema dumps.

``SchemaDumper`` runs a generator once, capturing the text of every phase in
a temporary buffer instead of the real destination, and routes each buffer
into a fresh ``SchemaDump``. Table bodies go through the statement parser.
The assembled result is written to the real destination at the end.
"""

import io
import logging
from collections.abc import Callable
from typing import TextIO

from schemadump.parser.parsers.statement_parser import TableStatementParser
from schemadump.typing.dump import SchemaDump, Table

from .assembler import DumpAssembler
from .config import DumperConfig
from .generator import SchemaGenerator
from .middleware import DumperEnv, MiddlewareStack


class PhaseInterceptor:
    """
    Captures the phases of one dump into one exclusively owned ``SchemaDump``.

    Handed to the generator as its ``phases``; a new interceptor (and a new
    dump) is created for every dump run.
    """

    def __init__(
        self,
        dumper: "SchemaDumper",
        generator: SchemaGenerator,
        dump: SchemaDump,
    ):
        self.dumper = dumper
        self.generator = generator
        self.dump = dump
        self.middleware = dumper.middleware
        self.parser = dumper.parser
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self) -> SchemaDump:
        """
        Run the generator through every phase.

        Whatever the generator writes straight to the dump destination is
        kept at the end of the header.
        """
        leaked = io.StringIO()
        self.generator.dump(leaked, self)
        self._absorb_leak("dump", leaked.getvalue())
        return self.dump

    def header(self) -> None:
        def implementation(env: DumperEnv) -> None:
            env.dump.header = self._capture("header", self.generator.header)

        self.middleware.initial.start(self._env("initial", initial=self.dump.initial), implementation)

    def extensions(self) -> None:
        def implementation(env: DumperEnv) -> None:
            text = self._capture("extensions", self.generator.extensions)
            if text.strip():
                env.dump.extensions.append(text)

        self.middleware.extensions.start(self._env("extensions"), implementation)

    def types(self) -> None:
        def implementation(env: DumperEnv) -> None:
            text = self._capture("types", self.generator.types)
            if text.strip():
                env.dump.types.append(text)

        self.middleware.types.start(self._env("types"), implementation)

    def tables(self) -> None:
        def implementation(env: DumperEnv) -> None:
            stream = io.StringIO()
            self.generator.tables(stream, self)
            # Direct writes come from other participants (e.g. type
            # definitions emitted ahead of tables), not from table bodies
            self._absorb_leak("tables", stream.getvalue())

        self.middleware.tables.start(self._env("tables"), implementation)

    def table(self, name: str) -> None:
        table = self.dump.tables[name] = Table(name=name)

        def implementation(env: DumperEnv) -> None:
            text = self._capture("table", self.generator.table, env.table.name)
            self.parser.parse(text, env.table)

        self.middleware.table.start(self._env("table", table=table, table_name=name), implementation)

    def foreign_keys(self, name: str) -> None:
        def implementation(env: DumperEnv) -> None:
            text = self._capture("foreign_keys", self.generator.foreign_keys, name)
            env.dump.final.extend(line.strip() for line in text.split("\n") if line.strip())

        self.middleware.foreign_keys.start(self._env("foreign_keys", table_name=name), implementation)

    def trailer(self) -> None:
        def implementation(env: DumperEnv) -> None:
            env.dump.trailer = self._capture("trailer", self.generator.trailer)

        self.middleware.trailer.start(self._env("trailer"), implementation)

    def _capture(self, phase: str, method: Callable[..., None], *args: str) -> str:
        sink = io.StringIO()
        method(*args, sink)
        text = sink.getvalue()
        self.logger.debug(f"Captured {len(text)} characters from phase '{phase}' {args or ''}")
        return text

    def _absorb_leak(self, phase: str, text: str) -> None:
        if text:
            self.logger.debug(f"Keeping {len(text)} characters written directly during '{phase}' in the header")
            self.dump.header += text

    def _env(self, phase: str, **payload) -> DumperEnv:
        return DumperEnv(
            dumper=self.dumper,
            connection=self.generator.connection,
            dump=self.dump,
            phase=phase,
            **payload,
        )


class SchemaDumper:
    """Dumps a schema through a generator with captured, observable phases."""

    def __init__(
        self,
        generator: SchemaGenerator,
        middleware: MiddlewareStack | None = None,
        config: DumperConfig | None = None,
        parser: TableStatementParser | None = None,
        assembler: DumpAssembler | None = None,
    ) -> None:
        self.generator = generator
        self.config = config or generator.config
        self.middleware = middleware or MiddlewareStack()
        self.parser = parser or TableStatementParser(strict=self.config.strict_statements)
        self.assembler = assembler or DumpAssembler(indent=self.config.indent)
        self.logger = logging.getLogger(self.__class__.__name__)

    def capture(self) -> SchemaDump:
        """
        Run the generator and return the structured dump without assembling it.

        Raises:
            SchemaDumpError: If parsing fails; generator errors propagate unchanged
        """
        dump = PhaseInterceptor(self, self.generator, SchemaDump()).run()
        self.logger.info(
            f"Captured {len(dump.tables)} tables, {len(dump.extensions)} extension block(s), "
            f"{len(dump.types)} type block(s) and {len(dump.final)} foreign key statement(s)"
        )
        return dump

    def dump(self, stream: TextIO) -> SchemaDump:
        """
        Dump the schema to a stream in dependency order.

        Args:
            stream: Final destination

        Returns:
            The captured dump that was assembled

        Raises:
            SchemaDumpError: If parsing or ordering fails; nothing is written then
        """
        dump = self.capture()
        self.assembler.assemble(dump, stream)
        return dump

    def dumps(self) -> str:
        """Dump the schema and return the assembled text."""
        stream = io.StringIO()
        self.dump(stream)
        return stream.getvalue()
