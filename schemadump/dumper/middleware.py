"""
Observer pipelines around the phases of a schema dump.

Every phase runs its core work inside a ``Pipeline``. Middleware registered
on the pipeline sees a ``DumperEnv`` before and after the core work and may
wrap it entirely through ``around``. All middleware of a phase shares the
same mutable dump, so observers can rewrite captured data before the
assembler reads it.

Example::

    stack = MiddlewareStack()

    @stack.table.after
    def drop_legacy_indexes(env):
        env.table.indexes = [i for i in env.table.indexes if not i.name.startswith("legacy_")]
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from schemadump.typing.dump import SchemaDump, Table

logger = logging.getLogger(__name__)

PHASES = ("initial", "extensions", "types", "tables", "table", "foreign_keys", "trailer")


@dataclass
class DumperEnv:
    """Context handed to middleware for one phase run."""

    dumper: Any
    connection: Any
    dump: SchemaDump
    phase: str
    initial: list[str] | None = None
    table: Table | None = None
    table_name: str | None = None


Hook = Callable[[DumperEnv], None]
Implementation = Callable[[DumperEnv], None]


class DumperMiddleware:
    """
    Base class for phase observers.

    Override any of the three hooks; the defaults do nothing except let the
    phase run.
    """

    def before(self, env: DumperEnv) -> None:
        pass

    def around(self, env: DumperEnv, call_next: Implementation) -> None:
        call_next(env)

    def after(self, env: DumperEnv) -> None:
        pass


class _HookMiddleware(DumperMiddleware):
    """Adapts plain functions registered through the decorators."""

    def __init__(self, before: Hook | None = None, after: Hook | None = None):
        self._before = before
        self._after = after

    def before(self, env: DumperEnv) -> None:
        if self._before is not None:
            self._before(env)

    def after(self, env: DumperEnv) -> None:
        if self._after is not None:
            self._after(env)

    def __repr__(self) -> str:
        hook = self._before or self._after
        return f"<hook {getattr(hook, '__name__', hook)!s}>"


class Pipeline:
    """Ordered middleware around one phase."""

    def __init__(self, name: str):
        self.name = name
        self._middleware: list[DumperMiddleware] = []

    def register(self, middleware: DumperMiddleware) -> DumperMiddleware:
        """
        Register middleware; registration order is execution order.

        Returns:
            The registered middleware, so the call can be used inline
        """
        self._middleware.append(middleware)
        logger.debug(f"Registered {middleware!r} on the '{self.name}' pipeline")
        return middleware

    def before(self, hook: Hook) -> Hook:
        """Decorator registering a function to run before the phase."""
        self.register(_HookMiddleware(before=hook))
        return hook

    def after(self, hook: Hook) -> Hook:
        """Decorator registering a function to run after the phase."""
        self.register(_HookMiddleware(after=hook))
        return hook

    def list_all(self) -> list[DumperMiddleware]:
        """List registered middleware in execution order."""
        return list(self._middleware)

    def clear(self) -> None:
        """Remove all middleware (mainly for testing)."""
        self._middleware.clear()

    def start(self, env: DumperEnv, implementation: Implementation) -> DumperEnv:
        """
        Run the phase.

        ``before`` hooks run in registration order, then the implementation
        wrapped by every ``around`` (first registered is outermost), then the
        ``after`` hooks in registration order. Exceptions propagate.

        Args:
            env: Phase context
            implementation: Core work of the phase

        Returns:
            The env, after every hook has seen it
        """
        for middleware in self._middleware:
            middleware.before(env)

        call = implementation
        for middleware in reversed(self._middleware):
            call = _wrap(middleware, call)
        call(env)

        for middleware in self._middleware:
            middleware.after(env)
        return env


def _wrap(middleware: DumperMiddleware, call_next: Implementation) -> Implementation:
    def wrapped(env: DumperEnv) -> None:
        middleware.around(env, call_next)

    return wrapped


class MiddlewareStack:
    """One pipeline per dump phase."""

    def __init__(self):
        self._pipelines = {phase: Pipeline(phase) for phase in PHASES}

    def __getattr__(self, name: str) -> Pipeline:
        pipelines = self.__dict__.get("_pipelines", {})
        if name in pipelines:
            return pipelines[name]
        raise AttributeError(name)

    def pipeline(self, phase: str) -> Pipeline:
        """
        Get the pipeline of a phase.

        Raises:
            KeyError: If the phase does not exist
        """
        if phase not in self._pipelines:
            raise KeyError(f"Unknown dump phase '{phase}'. Phases: {', '.join(PHASES)}")
        return self._pipelines[phase]

    def register(self, phase: str, middleware: DumperMiddleware) -> DumperMiddleware:
        """Register middleware on the pipeline of a phase."""
        return self.pipeline(phase).register(middleware)

    def clear(self) -> None:
        """Remove all middleware from every pipeline."""
        for pipeline in self._pipelines.values():
            pipeline.clear()
