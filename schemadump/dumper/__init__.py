"""
Dumper Module

Runs schema generators phase by phase, captures what they write and
assembles the result in dependency order.
"""

from .assembler import DumpAssembler
from .config import DumperConfig, DumperConfigManager
from .generator import DumpPhases, SchemaGenerator
from .generators import DuckDBSchemaGenerator, SchemaFileGenerator
from .interceptor import PhaseInterceptor, SchemaDumper
from .middleware import PHASES, DumperEnv, DumperMiddleware, MiddlewareStack, Pipeline

__all__ = [
    "SchemaDumper",
    "PhaseInterceptor",
    "DumpAssembler",
    "DumperConfig",
    "DumperConfigManager",
    "DumpPhases",
    "SchemaGenerator",
    "SchemaFileGenerator",
    "DuckDBSchemaGenerator",
    "DumperEnv",
    "DumperMiddleware",
    "MiddlewareStack",
    "Pipeline",
    "PHASES",
]
