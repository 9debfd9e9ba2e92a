"""
Tests for the schemadump command-line interface.
"""

import json

import duckdb
import pytest
import yaml
from typer.testing import CliRunner

from schemadump.cli.main import app
from schemadump.dumper.config import DumperConfigManager


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run every command from an empty folder without schemadump variables."""
    for env_var in DumperConfigManager.ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


class TestCLIHelpBehavior:
    """Commands show help when called without required arguments."""

    def test_without_command_shows_help(self, runner):
        """The bare command lists every subcommand."""
        result = runner.invoke(app, [])

        assert result.exit_code == 0
        for command in ("duckdb", "inspect", "reorder"):
            assert command in result.output

    @pytest.mark.parametrize("command", ["reorder", "inspect", "duckdb"])
    def test_without_argument_shows_help(self, runner, command):
        """Subcommands without their argument print their help."""
        result = runner.invoke(app, [command])

        assert result.exit_code == 0
        assert "Usage" in result.output


class TestReorderCommand:
    """Test cases for `schemadump reorder`."""

    def test_reorder_to_stdout(self, runner, schema_file, reordered_schema):
        """The reordered schema is printed."""
        result = runner.invoke(app, ["reorder", str(schema_file)])

        assert result.exit_code == 0
        assert result.stdout == reordered_schema

    def test_reorder_to_file(self, runner, schema_file, reordered_schema, tmp_path):
        """The reordered schema is written to the output file."""
        output = tmp_path / "out" / "schema.rb"

        result = runner.invoke(app, ["reorder", str(schema_file), "-o", str(output)])

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == reordered_schema

    def test_missing_file_fails(self, runner, tmp_path):
        """Unreadable input exits with status 1."""
        result = runner.invoke(app, ["reorder", str(tmp_path / "missing.rb")])

        assert result.exit_code == 1
        assert "Could not read schema file" in result.output

    def test_cycle_fails(self, runner, tmp_path):
        """Cyclic schemas are reported."""
        path = tmp_path / "cycle.rb"
        path.write_text(
            "Schema.define do\n"
            '  create_table "a" do |t|\n  end\n'
            '  create_table "b" do |t|\n  end\n'
            '  add_foreign_key "a", "b"\n'
            '  add_foreign_key "b", "a"\n'
            "end\n",
            encoding="utf-8",
        )

        result = runner.invoke(app, ["reorder", str(path)])

        assert result.exit_code == 1
        assert "Circular table dependencies" in result.output

    def test_strict_statements_from_pyproject(self, runner, isolated_config, tmp_path):
        """Settings in pyproject.toml of the working folder apply."""
        (isolated_config / "pyproject.toml").write_text(
            "[tool.schemadump]\nstrict_statements = true\n", encoding="utf-8"
        )
        path = tmp_path / "loose.rb"
        path.write_text(
            'Schema.define do\n  create_table "a" do |t|\n    t.timestamps\n  end\nend\n',
            encoding="utf-8",
        )

        result = runner.invoke(app, ["reorder", str(path)])

        assert result.exit_code == 1
        assert "unrecognised" in result.output


class TestInspectCommand:
    """Test cases for `schemadump inspect`."""

    def test_inspect_json(self, runner, schema_file):
        """JSON output lists tables and their order."""
        result = runner.invoke(app, ["inspect", str(schema_file)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["table_order"] == ["users", "posts", "comments"]
        assert [table["name"] for table in data["tables"]] == ["comments", "posts", "users"]

    def test_inspect_yaml_to_file(self, runner, schema_file, tmp_path):
        """YAML output can be written to a file."""
        output = tmp_path / "schema.yaml"

        result = runner.invoke(app, ["inspect", str(schema_file), "-f", "yaml", "-o", str(output)])

        assert result.exit_code == 0
        data = yaml.safe_load(output.read_text(encoding="utf-8"))
        posts = next(table for table in data["tables"] if table["name"] == "posts")
        assert posts["indexes"][0]["columns"] == ["lower((title)::text)", "user_id"]

    def test_invalid_format(self, runner, schema_file):
        """Unknown formats are rejected."""
        result = runner.invoke(app, ["inspect", str(schema_file), "-f", "xml"])

        assert result.exit_code != 0


class TestDuckDBCommand:
    """Test cases for `schemadump duckdb`."""

    def test_dump_database(self, runner, tmp_path):
        """A database file is dumped in dependency order."""
        database = tmp_path / "app.duckdb"
        conn = duckdb.connect(str(database))
        conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY)")
        conn.execute("CREATE TABLE accounts (id INTEGER PRIMARY KEY, user_id INTEGER REFERENCES users(id))")
        conn.close()
        output = tmp_path / "schema.rb"

        result = runner.invoke(app, ["duckdb", str(database), "-o", str(output)])

        assert result.exit_code == 0
        text = output.read_text(encoding="utf-8")
        assert text.index('create_table "users"') < text.index('create_table "accounts"')
        assert 'add_foreign_key "accounts", "users"' in text

    def test_missing_database(self, runner, tmp_path):
        """A missing database file is reported."""
        result = runner.invoke(app, ["duckdb", str(tmp_path / "missing.duckdb")])

        assert result.exit_code == 1
        assert "Database file not found" in result.output
