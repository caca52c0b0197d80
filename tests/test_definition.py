"""Tests for the target schema declaration."""

import pytest
from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.schema import CreateTable

from github_to_mysql.schema.definition import (
    ISSUE_LABELS_TABLE,
    ISSUES_TABLE,
    LABELS_TABLE,
    MILESTONES_TABLE,
    get_expected_columns,
    get_schema,
)

ALL_TABLES = {LABELS_TABLE, MILESTONES_TABLE, ISSUES_TABLE, ISSUE_LABELS_TABLE}


def _indexed_columns(table) -> set[tuple[str, ...]]:
    return {tuple(col.name for col in index.columns) for index in table.indexes}


class TestTables:
    """Verify the declared tables and columns."""

    def test_table_names(self) -> None:
        """Exactly the four prefixed tables are declared."""
        assert set(get_schema().tables) == ALL_TABLES

    def test_all_tables_prefixed(self) -> None:
        """Every table starts with github_."""
        assert all(name.startswith("github_") for name in get_schema().tables)

    def test_labels_columns(self) -> None:
        table = get_schema().tables[LABELS_TABLE]
        assert [c.name for c in table.columns] == ["id", "url", "name", "color"]

    def test_milestones_columns(self) -> None:
        table = get_schema().tables[MILESTONES_TABLE]
        assert [c.name for c in table.columns] == ["id", "title", "description", "url", "open"]

    def test_issues_columns(self) -> None:
        table = get_schema().tables[ISSUES_TABLE]
        assert [c.name for c in table.columns] == [
            "id",
            "title",
            "open",
            "author",
            "author_avatar_url",
            "created_at",
            "updated_at",
            "closed_at",
            "is_pull_request",
            "milestone_id",
        ]

    def test_nullable_columns(self) -> None:
        """Only author_avatar_url, closed_at and milestone_id accept NULL."""
        nullable = {
            (table.name, col.name)
            for table in get_schema().tables.values()
            for col in table.columns
            if col.nullable
        }
        assert nullable == {
            (ISSUES_TABLE, "author_avatar_url"),
            (ISSUES_TABLE, "closed_at"),
            (ISSUES_TABLE, "milestone_id"),
        }

    def test_primary_keys(self) -> None:
        tables = get_schema().tables
        assert [c.name for c in tables[LABELS_TABLE].primary_key.columns] == ["id"]
        assert [c.name for c in tables[MILESTONES_TABLE].primary_key.columns] == ["id"]
        assert [c.name for c in tables[ISSUES_TABLE].primary_key.columns] == ["id"]
        assert [c.name for c in tables[ISSUE_LABELS_TABLE].primary_key.columns] == [
            "issue_id",
            "label_id",
        ]

    def test_ids_not_autoincrement(self) -> None:
        """GitHub ids are stored as given."""
        for table in get_schema().tables.values():
            for col in table.primary_key.columns:
                assert col.autoincrement is False


class TestIndexes:
    """Verify declared indexes."""

    def test_labels_index(self) -> None:
        assert _indexed_columns(get_schema().tables[LABELS_TABLE]) == {("name",)}

    def test_milestones_index(self) -> None:
        assert _indexed_columns(get_schema().tables[MILESTONES_TABLE]) == {("title",)}

    def test_issues_indexes(self) -> None:
        assert _indexed_columns(get_schema().tables[ISSUES_TABLE]) == {
            ("author",),
            ("open",),
            ("created_at",),
            ("updated_at",),
            ("closed_at",),
            ("is_pull_request",),
        }

    def test_issue_labels_has_no_secondary_index(self) -> None:
        assert _indexed_columns(get_schema().tables[ISSUE_LABELS_TABLE]) == set()


class TestForeignKeys:
    """Verify foreign keys and their actions."""

    def test_issue_milestone_fk(self) -> None:
        """milestone_id references github_milestones.id without actions."""
        table = get_schema().tables[ISSUES_TABLE]
        (fk,) = table.foreign_keys
        assert fk.parent.name == "milestone_id"
        assert fk.target_fullname == f"{MILESTONES_TABLE}.id"
        assert fk.ondelete is None
        assert fk.onupdate is None

    def test_issue_labels_fks_cascade(self) -> None:
        """Both issue-label foreign keys cascade on update and delete."""
        table = get_schema().tables[ISSUE_LABELS_TABLE]
        targets = {}
        for fk in table.foreign_keys:
            targets[fk.parent.name] = fk.target_fullname
            assert fk.onupdate == "CASCADE"
            assert fk.ondelete == "CASCADE"
        assert targets == {
            "issue_id": f"{ISSUES_TABLE}.id",
            "label_id": f"{LABELS_TABLE}.id",
        }

    def test_dependency_order(self) -> None:
        """Parents sort before the tables that reference them."""
        order = [t.name for t in get_schema().sorted_tables]
        assert order.index(MILESTONES_TABLE) < order.index(ISSUES_TABLE)
        assert order.index(ISSUES_TABLE) < order.index(ISSUE_LABELS_TABLE)
        assert order.index(LABELS_TABLE) < order.index(ISSUE_LABELS_TABLE)


class TestRendering:
    """Verify dialect-specific rendering of the declaration."""

    def test_mysql_unsigned_ids(self) -> None:
        """Integer ids render as INTEGER UNSIGNED on MySQL, without AUTO_INCREMENT."""
        ddl = str(CreateTable(get_schema().tables[LABELS_TABLE]).compile(dialect=mysql.dialect()))
        assert "id INTEGER UNSIGNED NOT NULL" in ddl
        assert "AUTO_INCREMENT" not in ddl

    def test_mysql_unsigned_foreign_key_columns(self) -> None:
        ddl = str(
            CreateTable(get_schema().tables[ISSUE_LABELS_TABLE]).compile(dialect=mysql.dialect())
        )
        assert "issue_id INTEGER UNSIGNED NOT NULL" in ddl
        assert "label_id INTEGER UNSIGNED NOT NULL" in ddl
        assert "ON DELETE CASCADE ON UPDATE CASCADE" in ddl

    def test_sqlite_plain_integer(self) -> None:
        ddl = str(CreateTable(get_schema().tables[LABELS_TABLE]).compile(dialect=sqlite.dialect()))
        assert "id INTEGER NOT NULL" in ddl
        assert "UNSIGNED" not in ddl

    @pytest.mark.parametrize("dialect", [mysql.dialect(), sqlite.dialect()], ids=["mysql", "sqlite"])
    def test_deterministic(self, dialect) -> None:
        """Two builds render identical DDL."""
        first = get_schema()
        second = get_schema()
        for name in ALL_TABLES:
            assert str(CreateTable(first.tables[name]).compile(dialect=dialect)) == str(
                CreateTable(second.tables[name]).compile(dialect=dialect)
            )


class TestFreshInstances:
    """get_schema() never hands out shared state."""

    def test_new_metadata_each_call(self) -> None:
        assert get_schema() is not get_schema()

    def test_mutation_does_not_leak(self) -> None:
        """Removing a table from one instance leaves the next intact."""
        first = get_schema()
        first.remove(first.tables[LABELS_TABLE])
        assert LABELS_TABLE in get_schema().tables


class TestExpectedColumns:
    """Verify get_expected_columns()."""

    def test_maps_every_table(self) -> None:
        expected = get_expected_columns()
        assert set(expected) == ALL_TABLES
        assert expected[LABELS_TABLE] == {"id", "url", "name", "color"}
        assert expected[ISSUE_LABELS_TABLE] == {"issue_id", "label_id"}

    def test_uses_given_metadata(self) -> None:
        metadata = get_schema()
        metadata.remove(metadata.tables[ISSUE_LABELS_TABLE])
        assert ISSUE_LABELS_TABLE not in get_expected_columns(metadata)
