"""Pydantic models for schema introspection and validation.

This module contains schema-domain models:
- Introspection models: ColumnSchema, ConstraintSchema, IndexSchema,
  TableSchema, DatabaseSchema
- Validation models: ColumnDiff, SchemaValidationResult

Connection settings (DatabaseSettings) live in github_to_mysql.config.models.
"""

from pydantic import BaseModel, Field


# ============================================================================
# Validation Result Models
# ============================================================================


class ColumnDiff(BaseModel):
    """A missing column detected during validation."""

    table: str
    column: str
    message: str = ""


class SchemaValidationResult(BaseModel):
    """Result of schema validation.

    Example:
        >>> result = SchemaValidationResult(valid=True)
        >>> result.error_count
        0
        >>> result.format_report()
        'Schema valid'
    """

    valid: bool
    missing_tables: list[str] = Field(default_factory=list)
    missing_columns: list[ColumnDiff] = Field(default_factory=list)
    extra_tables: list[str] = Field(default_factory=list)  # Warning only

    @property
    def error_count(self) -> int:
        """Count of critical errors (missing tables + missing columns)."""
        return len(self.missing_tables) + len(self.missing_columns)

    def format_report(self) -> str:
        """Format validation result as human-readable report."""
        if self.valid:
            return "Schema valid"

        lines = ["Schema validation failed:"]

        if self.missing_tables:
            lines.append(f"\n  Missing tables ({len(self.missing_tables)}):")
            for table in self.missing_tables:
                lines.append(f"    - {table}")

        if self.missing_columns:
            lines.append(f"\n  Missing columns ({len(self.missing_columns)}):")
            for diff in self.missing_columns:
                lines.append(f"    - {diff.table}.{diff.column}")

        if self.extra_tables:
            lines.append(f"\n  Extra tables (warning): {', '.join(self.extra_tables)}")

        return "\n".join(lines)


# ============================================================================
# Schema Introspection Models
# ============================================================================


class ColumnSchema(BaseModel):
    """Schema for a database column.

    Example:
        >>> col = ColumnSchema(name="id", data_type="integer")
        >>> col.is_nullable
        True
    """

    name: str
    data_type: str
    is_nullable: bool = True
    default: str | None = None


class ConstraintSchema(BaseModel):
    """Schema for a database constraint."""

    name: str
    constraint_type: str  # PRIMARY KEY, FOREIGN KEY
    columns: list[str] = Field(default_factory=list)
    references_table: str | None = None
    references_columns: list[str] | None = None
    on_update: str | None = None
    on_delete: str | None = None


class IndexSchema(BaseModel):
    """Schema for a database index."""

    name: str
    columns: list[str] = Field(default_factory=list)
    is_unique: bool = False


class TableSchema(BaseModel):
    """Schema for a database table."""

    name: str
    columns: dict[str, ColumnSchema] = Field(default_factory=dict)
    constraints: dict[str, ConstraintSchema] = Field(default_factory=dict)
    indexes: dict[str, IndexSchema] = Field(default_factory=dict)

    @property
    def foreign_keys(self) -> list[ConstraintSchema]:
        return [c for c in self.constraints.values() if c.constraint_type == "FOREIGN KEY"]


class DatabaseSchema(BaseModel):
    """Snapshot of the prefixed tables of a database."""

    tables: dict[str, TableSchema] = Field(default_factory=dict)

    def column_names(self) -> dict[str, set[str]]:
        """Table name to column names, the shape ``validate_schema()`` takes."""
        return {name: set(table.columns) for name, table in self.tables.items()}
