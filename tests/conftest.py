"""
Pytest configuration and shared fixtures for schemadump tests.
"""

import pytest

from schemadump.parser.parsers.pattern_registry import PatternRegistry
from schemadump.parser.parsers.statement_parser import TableStatementParser
from schemadump.typing.dump import Column, Index, SchemaDump, Table

SAMPLE_SCHEMA = '''\
# This file is auto-generated from the current state of the database.

ActiveRecord::Schema[7.1].define(version: 2024_01_01_000000) do
  # These are extensions that must be enabled in order to support this database
  enable_extension "plpgsql"

  create_enum "status", ["draft", "published"]

  create_table "comments", force: :cascade do |t|
    t.bigint "post_id", null: false
    t.text "body"
    t.index ["post_id"], name: "index_comments_on_post_id"
  end

  create_table "posts", force: :cascade do |t|
    t.string "title", null: false
    t.bigint "user_id"
    t.enum "status", default: "draft", enum_type: "status"
    t.datetime "created_at", default: -> { "CURRENT_TIMESTAMP" }
    t.index "lower((title)::text), user_id", name: "index_posts_on_lower_title"
  end

  create_table "users", force: :cascade do |t|
    t.string "email", null: false
    t.index ["email"], name: "index_users_on_email", unique: true
  end

  add_foreign_key "comments", "posts"
  add_foreign_key "posts", "users"
end
'''

REORDERED_SCHEMA = '''\
# This file is auto-generated from the current state of the database.

ActiveRecord::Schema[7.1].define(version: 2024_01_01_000000) do
  # These are extensions that must be enabled in order to support this database
  enable_extension "plpgsql"

  create_enum "status", ["draft", "published"]

  create_table "users", force: :cascade do |t|
    t.string "email", null: false
    t.index ["email"], name: "index_users_on_email", unique: true
  end

  create_table "posts", force: :cascade do |t|
    t.string "title", null: false
    t.bigint "user_id"
    t.enum "status", default: "draft", enum_type: "status"
    t.datetime "created_at", default: -> { "CURRENT_TIMESTAMP" }
    t.index "lower((title)::text), user_id", name: "index_posts_on_lower_title"
  end

  create_table "comments", force: :cascade do |t|
    t.bigint "post_id", null: false
    t.text "body"
    t.index ["post_id"], name: "index_comments_on_post_id"
  end

  add_foreign_key "comments", "posts"
  add_foreign_key "posts", "users"
end
'''


@pytest.fixture
def sample_schema():
    """A complete schema file with tables out of dependency order."""
    return SAMPLE_SCHEMA


@pytest.fixture
def reordered_schema():
    """The sample schema with tables in dependency order."""
    return REORDERED_SCHEMA


@pytest.fixture
def schema_file(tmp_path):
    """Write the sample schema to a temporary file."""
    path = tmp_path / "schema.rb"
    path.write_text(SAMPLE_SCHEMA, encoding="utf-8")
    return path


@pytest.fixture
def registry():
    """Create a PatternRegistry with the default rules."""
    return PatternRegistry.default()


@pytest.fixture
def statement_parser():
    """Create a TableStatementParser instance."""
    return TableStatementParser()


def make_table(name: str, trailer: list[str] | None = None, **kwargs) -> Table:
    """Build a structured table with one id column."""
    return Table(
        name=name,
        pname=name,
        options="force: :cascade",
        columns=kwargs.pop("columns", [Column(name="id", type="bigint", options={"null": False})]),
        indexes=kwargs.pop("indexes", []),
        trailer=trailer or [],
        **kwargs,
    )


@pytest.fixture
def blog_dump():
    """A dump with three tables linked by foreign keys, discovered out of order."""
    dump = SchemaDump(header="Schema.define do\n", trailer="end\n")
    dump.tables["comments"] = make_table(
        "comments",
        indexes=[Index(name="index_comments_on_post_id", columns=["post_id"])],
    )
    dump.tables["posts"] = make_table("posts")
    dump.tables["users"] = make_table("users")
    dump.final = ['add_foreign_key "comments", "posts"', 'add_foreign_key "posts", "users"']
    return dump
