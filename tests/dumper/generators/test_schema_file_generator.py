"""
Tests for SchemaFileGenerator.
"""

import pytest

from schemadump.dumper.config import DumperConfig
from schemadump.dumper.generators.schema_file import SchemaFileGenerator
from schemadump.dumper.interceptor import SchemaDumper
from schemadump.parser.shared.exceptions import GeneratorError


class TestSchemaFileGenerator:
    """Test cases for splitting schema files into phases."""

    def test_reorder_sample_schema(self, sample_schema, reordered_schema):
        """Dumping a schema file writes its tables in dependency order."""
        assert SchemaDumper(SchemaFileGenerator(sample_schema)).dumps() == reordered_schema

    def test_dumping_is_idempotent(self, reordered_schema):
        """An ordered schema is written back unchanged."""
        assert SchemaDumper(SchemaFileGenerator(reordered_schema)).dumps() == reordered_schema

    def test_capture(self, sample_schema):
        """Phases are split into their dump sections."""
        dump = SchemaDumper(SchemaFileGenerator(sample_schema)).capture()

        assert dump.header.endswith("ActiveRecord::Schema[7.1].define(version: 2024_01_01_000000) do\n")
        assert list(dump.tables) == ["comments", "posts", "users"]
        assert dump.extensions == [
            "  # These are extensions that must be enabled in order to support this database\n"
            '  enable_extension "plpgsql"\n\n'
        ]
        assert dump.types == ['  create_enum "status", ["draft", "published"]\n\n']
        assert dump.final == ['add_foreign_key "comments", "posts"', 'add_foreign_key "posts", "users"']
        assert dump.trailer == "end\n"
        assert dump.tables["posts"].column("status").options == {"default": "draft", "enum_type": "status"}

    def test_list_tables(self, sample_schema):
        """Tables are listed in file order."""
        assert SchemaFileGenerator(sample_schema).list_tables() == ["comments", "posts", "users"]

    def test_from_file(self, schema_file, reordered_schema):
        """Schema files are read from disk."""
        generator = SchemaFileGenerator.from_file(schema_file)

        assert generator.source == str(schema_file)
        assert SchemaDumper(generator).dumps() == reordered_schema

    def test_missing_file(self, tmp_path):
        """Unreadable files raise GeneratorError."""
        with pytest.raises(GeneratorError, match="Could not read"):
            SchemaFileGenerator.from_file(tmp_path / "missing.rb")

    def test_no_define_block(self):
        """Text without a define block is rejected."""
        with pytest.raises(GeneratorError, match="No schema definition"):
            SchemaFileGenerator('create_table "a" do |t|\nend\n')

    def test_unclosed_define_block(self):
        """A define block needs its closing end."""
        with pytest.raises(GeneratorError, match="never closed"):
            SchemaFileGenerator("Schema.define do\n  enable_extension \"x\"\n")

    def test_duplicate_table(self):
        """A table may only be defined once."""
        text = 'Schema.define do\n  create_table "a" do |t|\n  end\n  create_table "a" do |t|\n  end\nend\n'

        with pytest.raises(GeneratorError, match="defined twice"):
            SchemaFileGenerator(text)

    def test_ignored_tables(self, sample_schema):
        """Ignored tables and their foreign keys are left out."""
        generator = SchemaFileGenerator(sample_schema, config=DumperConfig(ignore_tables=["comments"]))

        dump = SchemaDumper(generator).capture()

        assert list(dump.tables) == ["posts", "users"]
        assert dump.final == ['add_foreign_key "posts", "users"']

    def test_statements_follow_their_table(self):
        """Other statements stay after the table they follow."""
        text = (
            "Schema.define do\n"
            '  create_table "b", force: :cascade do |t|\n'
            '    t.bigint "a_id"\n'
            "  end\n"
            '  add_index "b", ["a_id"]\n'
            "\n"
            '  create_table "a", force: :cascade do |t|\n'
            "  end\n"
            '  add_foreign_key "b", "a"\n'
            "end\n"
        )

        dump = SchemaDumper(SchemaFileGenerator(text)).capture()
        output = SchemaDumper(SchemaFileGenerator(text)).dumps()

        assert dump.tables["b"].trailer == ['add_index "b", ["a_id"]']
        assert output.index('create_table "a"') < output.index('create_table "b"')
        assert output.index('create_table "b"') < output.index('add_index "b"')

    def test_statements_before_first_table_leak_into_header(self):
        """Statements without a preceding table are kept after the header."""
        text = (
            "Schema.define do\n"
            '  execute "CREATE SEQUENCE s"\n'
            '  create_table "a" do |t|\n'
            "  end\n"
            "end\n"
        )

        dump = SchemaDumper(SchemaFileGenerator(text)).capture()

        assert dump.header == 'Schema.define do\n  execute "CREATE SEQUENCE s"\n'

    def test_heredoc_statement_is_one_statement(self):
        """Heredoc bodies are not split into statements."""
        text = (
            "Schema.define do\n"
            '  create_table "a" do |t|\n'
            "  end\n"
            "  execute <<~SQL\n"
            '    create_table "fake" do |t|\n'
            "  SQL\n"
            "end\n"
        )

        generator = SchemaFileGenerator(text)

        assert generator.list_tables() == ["a"]

    def test_foreign_keys_of_undefined_tables_are_kept(self):
        """Foreign keys whose source table is not defined still reach the dump."""
        text = (
            "Schema.define do\n"
            '  create_table "a" do |t|\n'
            "  end\n"
            '  add_foreign_key "external", "a"\n'
            "end\n"
        )

        dump = SchemaDumper(SchemaFileGenerator(text)).capture()

        assert dump.final == ['add_foreign_key "external", "a"']
