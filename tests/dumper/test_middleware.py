"""
Tests for phase pipelines and middleware ordering.
"""

import pytest

from schemadump.dumper.middleware import PHASES, DumperEnv, DumperMiddleware, MiddlewareStack, Pipeline
from schemadump.typing.dump import SchemaDump


class Recorder(DumperMiddleware):
    """Middleware writing every hook call into a shared log."""

    def __init__(self, label: str, log: list[str]):
        self.label = label
        self.log = log

    def before(self, env):
        self.log.append(f"{self.label}.before")

    def around(self, env, call_next):
        self.log.append(f"{self.label}.around>")
        call_next(env)
        self.log.append(f"{self.label}.around<")

    def after(self, env):
        self.log.append(f"{self.label}.after")


@pytest.fixture
def env():
    """A phase context for a fresh dump."""
    return DumperEnv(dumper=None, connection=None, dump=SchemaDump(), phase="tables")


class TestPipeline:
    """Test cases for Pipeline.start."""

    def test_no_middleware_runs_implementation(self, env):
        """An empty pipeline only runs the phase."""
        calls = []

        Pipeline("tables").start(env, lambda e: calls.append(e))

        assert calls == [env]

    def test_hook_order(self, env):
        """Befores and afters run in registration order, the first around is outermost."""
        log: list[str] = []
        pipeline = Pipeline("tables")
        pipeline.register(Recorder("one", log))
        pipeline.register(Recorder("two", log))

        pipeline.start(env, lambda e: log.append("phase"))

        assert log == [
            "one.before",
            "two.before",
            "one.around>",
            "two.around>",
            "phase",
            "two.around<",
            "one.around<",
            "one.after",
            "two.after",
        ]

    def test_around_can_skip_the_phase(self, env):
        """An around hook that does not call through suppresses the phase."""

        class Skip(DumperMiddleware):
            def around(self, env, call_next):
                pass

        calls = []
        pipeline = Pipeline("tables")
        pipeline.register(Skip())

        pipeline.start(env, lambda e: calls.append(e))

        assert calls == []

    def test_decorators_register_functions(self, env):
        """before and after decorators wrap plain functions."""
        log: list[str] = []
        pipeline = Pipeline("tables")

        @pipeline.after
        def late(env):
            log.append(f"after:{env.phase}")

        @pipeline.before
        def early(env):
            log.append(f"before:{env.phase}")

        pipeline.start(env, lambda e: log.append("phase"))

        assert log == ["before:tables", "phase", "after:tables"]
        assert late.__name__ == "late"
        assert len(pipeline.list_all()) == 2

    def test_observers_mutate_the_shared_dump(self, env):
        """Hooks see the same dump the phase writes to."""
        pipeline = Pipeline("tables")
        pipeline.after(lambda e: e.dump.final.append("added by observer"))

        pipeline.start(env, lambda e: e.dump.final.append("phase"))

        assert env.dump.final == ["phase", "added by observer"]

    def test_errors_propagate(self, env):
        """Exceptions from hooks abort the phase."""
        pipeline = Pipeline("tables")

        @pipeline.before
        def fail(env):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            pipeline.start(env, lambda e: None)

    def test_clear(self):
        """clear removes every middleware."""
        pipeline = Pipeline("tables")
        pipeline.register(DumperMiddleware())
        pipeline.clear()

        assert pipeline.list_all() == []


class TestMiddlewareStack:
    """Test cases for MiddlewareStack."""

    def test_one_pipeline_per_phase(self):
        """Every phase has its own pipeline, reachable as an attribute."""
        stack = MiddlewareStack()

        for phase in PHASES:
            assert stack.pipeline(phase) is getattr(stack, phase)
            assert stack.pipeline(phase).name == phase

    def test_unknown_phase(self):
        """Unknown phases are rejected."""
        stack = MiddlewareStack()

        with pytest.raises(KeyError):
            stack.pipeline("columns")
        with pytest.raises(AttributeError):
            stack.columns

    def test_register_and_clear(self):
        """Registering through the stack targets one phase."""
        stack = MiddlewareStack()
        middleware = stack.register("table", DumperMiddleware())

        assert stack.table.list_all() == [middleware]
        assert stack.tables.list_all() == []

        stack.clear()
        assert stack.table.list_all() == []
