"""Live schema introspection through SQLAlchemy's ``Inspector``.

This module reads the current structure of the prefixed tables:
- Tables, columns, data types, nullability, defaults
- Constraints (primary key, foreign key)
- Indexes (name, columns, uniqueness)

Works with any backend SQLAlchemy can reflect (MySQL, SQLite, PostgreSQL).
"""

import re

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine, Inspector

from github_to_mysql.factory import DEFAULT_ASSET_FILTER, SCHEMA_ASSET_FILTER
from github_to_mysql.schema.models import (
    ColumnSchema,
    ConstraintSchema,
    DatabaseSchema,
    IndexSchema,
    TableSchema,
)


class SchemaIntrospector:
    """Introspects the tables selected by the schema-asset filter.

    The filter is taken from the engine's ``schema_asset_filter`` execution
    option (set by ``ConnectionManager``) unless *table_filter* is given.

    Usage:
        with SchemaIntrospector(engine) as introspector:
            schema = introspector.introspect()
            columns = introspector.get_column_names()
    """

    def __init__(self, engine: Engine, table_filter: str | None = None):
        """Initialize with an engine.

        Args:
            engine: Engine to read from.
            table_filter: Regex a table name must match to be visible.
        """
        if table_filter is None:
            table_filter = engine.get_execution_options().get(
                SCHEMA_ASSET_FILTER, DEFAULT_ASSET_FILTER
            )
        self._engine = engine
        self._pattern = re.compile(table_filter)
        self._conn: Connection | None = None
        self._inspector: Inspector | None = None

    def __enter__(self) -> "SchemaIntrospector":
        """Context manager entry - opens connection."""
        self._conn = self._engine.connect()
        self._inspector = inspect(self._conn)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
            self._inspector = None

    def _require_inspector(self) -> Inspector:
        if self._inspector is None:
            raise RuntimeError("Introspector not connected. Use with statement.")
        return self._inspector

    def get_table_names(self) -> list[str]:
        """Names of the visible tables, sorted."""
        inspector = self._require_inspector()
        return sorted(
            name for name in inspector.get_table_names() if self._pattern.search(name)
        )

    def introspect(self) -> DatabaseSchema:
        """Introspect the visible tables.

        Returns:
            DatabaseSchema with columns, constraints and indexes per table.
        """
        self._require_inspector()

        db_schema = DatabaseSchema()
        for table_name in self.get_table_names():
            db_schema.tables[table_name] = TableSchema(
                name=table_name,
                columns=self._get_columns(table_name),
                constraints=self._get_constraints(table_name),
                indexes=self._get_indexes(table_name),
            )
        return db_schema

    def get_column_names(self) -> dict[str, set[str]]:
        """Get column names for all visible tables (input for the comparator).

        Returns:
            Dict mapping table name to set of column names
        """
        inspector = self._require_inspector()
        return {
            table_name: {col["name"] for col in inspector.get_columns(table_name)}
            for table_name in self.get_table_names()
        }

    def _get_columns(self, table_name: str) -> dict[str, ColumnSchema]:
        """Get columns for a table."""
        dialect = self._conn.dialect
        columns = {}
        for col in self._inspector.get_columns(table_name):
            default = col.get("default")
            columns[col["name"]] = ColumnSchema(
                name=col["name"],
                data_type=col["type"].compile(dialect=dialect).lower(),
                is_nullable=col["nullable"],
                default=str(default) if default is not None else None,
            )
        return columns

    def _get_constraints(self, table_name: str) -> dict[str, ConstraintSchema]:
        """Get primary key and foreign key constraints for a table."""
        constraints: dict[str, ConstraintSchema] = {}

        pk = self._inspector.get_pk_constraint(table_name)
        if pk and pk.get("constrained_columns"):
            name = pk.get("name") or f"{table_name}_pkey"
            constraints[name] = ConstraintSchema(
                name=name,
                constraint_type="PRIMARY KEY",
                columns=list(pk["constrained_columns"]),
            )

        for fk in self._inspector.get_foreign_keys(table_name):
            columns = list(fk["constrained_columns"])
            name = fk.get("name") or f"{table_name}_{'_'.join(columns)}_fkey"
            options = fk.get("options") or {}
            constraints[name] = ConstraintSchema(
                name=name,
                constraint_type="FOREIGN KEY",
                columns=columns,
                references_table=fk["referred_table"],
                references_columns=list(fk["referred_columns"]),
                on_update=options.get("onupdate"),
                on_delete=options.get("ondelete"),
            )

        return constraints

    def _get_indexes(self, table_name: str) -> dict[str, IndexSchema]:
        """Get indexes for a table (excluding primary key)."""
        indexes = {}
        for idx in self._inspector.get_indexes(table_name):
            indexes[idx["name"]] = IndexSchema(
                name=idx["name"],
                columns=[c for c in idx["column_names"] if c is not None],
                is_unique=bool(idx["unique"]),
            )
        return indexes
