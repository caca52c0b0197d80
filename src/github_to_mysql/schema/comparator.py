"""Column-level drift report between the live tables and the target schema.

Works on plain ``{table: {column, ...}}`` mappings and never touches a
database.

Usage:
    from github_to_mysql.schema.comparator import validate_schema
    from github_to_mysql.schema.definition import get_expected_columns
    from github_to_mysql.schema.introspector import SchemaIntrospector

    with SchemaIntrospector(engine) as introspector:
        snapshot = introspector.introspect()

    result = validate_schema(snapshot.column_names(), get_expected_columns())
    if not result.valid:
        print(result.format_report())
"""

from github_to_mysql.schema.models import ColumnDiff, SchemaValidationResult


def _missing_columns(
    actual_columns: dict[str, set[str]],
    expected_columns: dict[str, set[str]],
) -> list[ColumnDiff]:
    shared = sorted(expected_columns.keys() & actual_columns.keys())
    return [
        ColumnDiff(
            table=table,
            column=column,
            message=f"Column '{column}' missing from table '{table}'",
        )
        for table in shared
        for column in sorted(expected_columns[table] - actual_columns[table])
    ]


def validate_schema(
    actual_columns: dict[str, set[str]],
    expected_columns: dict[str, set[str]],
) -> SchemaValidationResult:
    """Check that every expected table and column exists in the database.

    A table or column that is expected but absent makes the result invalid.
    Tables present only in *actual_columns* are reported in ``extra_tables``
    and leave ``valid`` untouched. Columns present only in the database are
    ignored. All lists are sorted.

    Args:
        actual_columns: Live table name to column names, e.g.
            ``DatabaseSchema.column_names()``.
        expected_columns: Target table name to column names, e.g.
            ``get_expected_columns()``.

    Examples:
        >>> result = validate_schema(
        ...     {"github_labels": {"id"}},
        ...     {"github_labels": {"id", "name"}},
        ... )
        >>> result.valid
        False
        >>> result.missing_columns[0].column
        'name'
    """
    missing_tables = sorted(expected_columns.keys() - actual_columns.keys())
    missing_columns = _missing_columns(actual_columns, expected_columns)

    return SchemaValidationResult(
        valid=not (missing_tables or missing_columns),
        missing_tables=missing_tables,
        missing_columns=missing_columns,
        extra_tables=sorted(actual_columns.keys() - expected_columns.keys()),
    )
