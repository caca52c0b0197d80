"""Target schema, migration, introspection and validation.

Provides the target schema (``get_schema``), migration to it
(``get_migration_statements``, ``create_schema``), live introspection
(``SchemaIntrospector``) and column-level drift reports (``validate_schema``).

Usage:
    from github_to_mysql.schema import get_schema, create_schema
    from github_to_mysql.schema import SchemaIntrospector, validate_schema
"""

from github_to_mysql.schema.comparator import validate_schema
from github_to_mysql.schema.definition import get_expected_columns, get_schema
from github_to_mysql.schema.introspector import SchemaIntrospector
from github_to_mysql.schema.migrate import (
    create_schema,
    get_migration_statements,
    render_statements,
)
from github_to_mysql.schema.models import (
    ColumnDiff,
    ColumnSchema,
    ConstraintSchema,
    DatabaseSchema,
    IndexSchema,
    SchemaValidationResult,
    TableSchema,
)

__all__ = [
    "get_schema",
    "get_expected_columns",
    "get_migration_statements",
    "render_statements",
    "create_schema",
    "SchemaIntrospector",
    "validate_schema",
    "SchemaValidationResult",
    "ColumnDiff",
    "ColumnSchema",
    "ConstraintSchema",
    "IndexSchema",
    "TableSchema",
    "DatabaseSchema",
]
