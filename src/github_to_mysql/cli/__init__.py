"""CLI for previewing and applying the GitHub tables schema.

Usage:
    DB_NAME=github github-to-mysql migrate            # dry run
    DB_NAME=github github-to-mysql migrate --force    # apply
    DB_NAME=github github-to-mysql validate
    github-to-mysql --config db.toml --driver sqlite migrate

Commands:
    migrate   - Show (or with --force, execute) the DDL to reach the target schema
    validate  - Report missing tables and columns without changing anything
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from github_to_mysql.config.loader import load_settings
from github_to_mysql.factory import DEFAULT_DRIVER, ConnectionManager
from github_to_mysql.schema.comparator import validate_schema
from github_to_mysql.schema.definition import get_expected_columns
from github_to_mysql.schema.introspector import SchemaIntrospector
from github_to_mysql.schema.migrate import create_schema
from github_to_mysql.schema.models import DatabaseSchema

console = Console()


def _build_manager(args: argparse.Namespace) -> ConnectionManager | None:
    """Load settings and build a connection manager.

    Prints the error and returns ``None`` if the configuration is invalid.
    """
    config_path = Path(args.config) if args.config else None
    try:
        settings = load_settings(config_path=config_path)
    except (FileNotFoundError, ValidationError) as e:
        console.print(f"[bold red]x[/bold red] Invalid configuration: {escape(str(e))}")
        console.print("[dim]Set[/dim] [cyan]DB_NAME[/cyan] [dim]or pass[/dim] [cyan]--config[/cyan].")
        return None
    return ConnectionManager(settings)


def cmd_migrate(args: argparse.Namespace) -> int:
    """Handle migrate command.

    Args:
        args: Parsed arguments with config, driver and force.

    Returns:
        0 on success, 1 on failure.
    """
    manager = _build_manager(args)
    if manager is None:
        return 1

    statements: list[str] = []

    def on_running(connection: Connection, sql: str) -> None:
        statements.append(sql)
        console.print(f"{sql};", markup=False, highlight=False)

    def on_up_to_date(connection: Connection) -> None:
        console.print("[bold green]v[/bold green] Database schema is up to date")

    try:
        engine = manager.connect(args.driver)
        create_schema(
            engine,
            force=args.force,
            on_running=on_running,
            on_up_to_date=on_up_to_date,
        )
    except (SQLAlchemyError, NotImplementedError) as e:
        # NotImplementedError: the dialect cannot render an operation
        console.print()
        console.print(f"[bold red]x[/bold red] Migration failed: {escape(str(e))}")
        return 1
    finally:
        manager.close()

    if statements:
        console.print()
        if args.force:
            console.print(
                f"[bold green]v[/bold green] Applied {len(statements)} statement(s)"
            )
        else:
            console.print(
                f"[yellow]{len(statements)} statement(s) pending.[/yellow] "
                "[dim]To apply them, add[/dim] [cyan]--force[/cyan][dim].[/dim]"
            )
    return 0


def _print_snapshot(snapshot: DatabaseSchema) -> None:
    table = Table(title="Live Tables", show_header=True, header_style="bold")
    table.add_column("Table", style="dim")
    table.add_column("Columns", justify="right")
    table.add_column("Indexes", justify="right")
    table.add_column("References")

    for name, live in snapshot.tables.items():
        table.add_row(
            name,
            str(len(live.columns)),
            str(len(live.indexes)),
            ", ".join(sorted({fk.references_table for fk in live.foreign_keys})),
        )

    console.print(table)


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command.

    Args:
        args: Parsed arguments with config and driver.

    Returns:
        0 on valid schema, 1 on drift or failure.
    """
    manager = _build_manager(args)
    if manager is None:
        return 1

    try:
        engine = manager.connect(args.driver)
        with SchemaIntrospector(engine) as introspector:
            snapshot = introspector.introspect()
    except SQLAlchemyError as e:
        console.print(f"[bold red]x[/bold red] Failed to introspect database: {escape(str(e))}")
        return 1
    finally:
        manager.close()

    if snapshot.tables:
        _print_snapshot(snapshot)
        console.print()

    result = validate_schema(snapshot.column_names(), get_expected_columns())

    if result.valid:
        console.print("[bold green]v[/bold green] Schema is valid")
        if result.extra_tables:
            console.print(
                f"  Extra tables: [yellow]{', '.join(result.extra_tables)}[/yellow]"
            )
        return 0

    console.print("[bold red]x[/bold red] Schema has drifted")
    console.print(escape(result.format_report()))
    console.print(
        "[dim]Run[/dim] [cyan]github-to-mysql migrate[/cyan] [dim]to see the fix.[/dim]"
    )
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="github-to-mysql",
        description="Keep the GitHub issues/labels/milestones tables in sync",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="TOML file with a [database] table (DB_* env vars take precedence)",
    )
    parser.add_argument(
        "--driver",
        default=DEFAULT_DRIVER,
        help=f"SQLAlchemy dialect+driver (default: {DEFAULT_DRIVER})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_migrate = subparsers.add_parser(
        "migrate",
        help="Show the DDL needed to reach the target schema",
    )
    p_migrate.add_argument(
        "--force",
        action="store_true",
        help="Execute the statements instead of only printing them",
    )
    p_migrate.set_defaults(func=cmd_migrate)

    p_validate = subparsers.add_parser(
        "validate",
        help="Check that every table and column exists",
    )
    p_validate.set_defaults(func=cmd_validate)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console)],
        )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
