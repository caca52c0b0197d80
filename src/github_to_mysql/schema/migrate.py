"""Bring the live database in line with the target schema.

Diffing and DDL rendering are delegated to Alembic's autogenerate: the live
schema is compared against ``get_schema()`` and every resulting operation is
rendered to SQL for the connection's dialect.  ``create_schema()`` then
previews or executes the statements inside one transaction.

Usage:
    from github_to_mysql.factory import ConnectionManager
    from github_to_mysql.schema.migrate import create_schema

    engine = ConnectionManager().connect()
    create_schema(
        engine,
        force=False,
        on_running=lambda conn, sql: print(sql),
        on_up_to_date=lambda conn: print("Up to date"),
    )
"""

import logging
import re
from collections.abc import Callable, Iterator

from alembic.autogenerate import produce_migrations
from alembic.migration import MigrationContext
from alembic.operations import Operations
from alembic.operations.ops import CreateTableOp, MigrateOperation
from sqlalchemy import Column, MetaData
from sqlalchemy.engine import Connection, Dialect, Engine

from github_to_mysql.factory import DEFAULT_ASSET_FILTER, SCHEMA_ASSET_FILTER
from github_to_mysql.schema.definition import get_schema

logger = logging.getLogger(__name__)

OnRunning = Callable[[Connection, str], None]
OnUpToDate = Callable[[Connection], None]


class _StatementCollector:
    """Output buffer for offline rendering that keeps one entry per statement.

    Alembic writes each rendered statement with a single ``write()`` call.
    """

    def __init__(self) -> None:
        self.statements: list[str] = []

    def write(self, text: str) -> None:
        statement = text.strip()
        if statement.endswith(";"):
            statement = statement[:-1].rstrip()
        if statement:
            self.statements.append(statement)

    def flush(self) -> None:
        pass


def _flatten(operations: list[MigrateOperation]) -> Iterator[MigrateOperation]:
    """Yield leaf operations, unpacking per-table containers in order."""
    for operation in operations:
        nested = getattr(operation, "ops", None)
        if nested is not None:
            yield from _flatten(nested)
        else:
            yield operation


def _order_constraints(operation: CreateTableOp) -> None:
    """Put table-level constraints in declaration order.

    ``Table.constraints`` is a set, so Alembic hands them over in hash order.
    Columns keep their position; constraints follow, oldest first.
    """
    columns = [item for item in operation.columns if isinstance(item, Column)]
    constraints = [item for item in operation.columns if not isinstance(item, Column)]
    constraints.sort(key=lambda constraint: constraint._creation_order)
    operation.columns = columns + constraints


def render_statements(
    operations: list[MigrateOperation],
    dialect: Dialect,
) -> list[str]:
    """Render Alembic operations to SQL strings for *dialect*.

    Nothing is executed; Alembic runs in offline (``as_sql``) mode and every
    statement it writes is collected.

    Args:
        operations: Top-level operations, e.g. ``script.upgrade_ops.ops``.
        dialect: Dialect to render for.

    Returns:
        One string per statement, in order, without trailing ``;``.

    Raises:
        NotImplementedError: The dialect cannot express an operation, e.g.
            adding a foreign key to an existing SQLite table.
    """
    collector = _StatementCollector()
    render_context = MigrationContext.configure(
        dialect=dialect,
        opts={"as_sql": True, "output_buffer": collector},
    )
    renderer = Operations(render_context)
    for operation in _flatten(operations):
        if isinstance(operation, CreateTableOp):
            _order_constraints(operation)
        renderer.invoke(operation)

    return collector.statements


def _table_filter(connection: Connection) -> Callable[..., bool]:
    pattern = re.compile(
        connection.get_execution_options().get(SCHEMA_ASSET_FILTER, DEFAULT_ASSET_FILTER)
    )

    def include_name(name, type_, parent_names) -> bool:
        if type_ == "table":
            return pattern.search(name) is not None
        return True

    return include_name


def get_migration_statements(
    connection: Connection,
    metadata: MetaData | None = None,
) -> list[str]:
    """Compute the DDL that turns the live schema into *metadata*.

    Only tables matching the connection's ``schema_asset_filter`` execution
    option (default ``^github_``) are introspected; other tables are never
    dropped or altered.

    Args:
        connection: Open connection to the target database.
        metadata: Target schema (default: a fresh ``get_schema()``).

    Returns:
        Statements in execution order, without trailing ``;``.  Empty when
        the database already matches.
    """
    if metadata is None:
        metadata = get_schema()

    live_context = MigrationContext.configure(
        connection,
        opts={
            "include_name": _table_filter(connection),
            "compare_type": True,
        },
    )
    script = produce_migrations(live_context, metadata)
    return render_statements(script.upgrade_ops.ops, connection.dialect)


def create_schema(
    engine: Engine,
    force: bool,
    on_running: OnRunning | None = None,
    on_up_to_date: OnUpToDate | None = None,
) -> None:
    """Preview or apply the migration to the target schema.

    Runs inside ``engine.begin()``: committed on success, rolled back if any
    statement fails.  Errors propagate unchanged.

    Args:
        engine: Engine from ``ConnectionManager.connect()``.
        force: Execute the statements.  When ``False`` nothing is executed.
        on_running: Called as ``on_running(connection, sql)`` before each
            statement.
        on_up_to_date: Called as ``on_up_to_date(connection)`` when there is
            nothing to do.
    """
    target = get_schema()

    with engine.begin() as connection:
        statements = get_migration_statements(connection, target)
        logger.info(f"{len(statements)} migration statement(s), force={force}")

        for sql in statements:
            if on_running is not None:
                on_running(connection, sql)
            if force:
                logger.debug(f"Executing: {sql}")
                connection.exec_driver_sql(sql)

        if not statements and on_up_to_date is not None:
            on_up_to_date(connection)
