"""github-to-mysql: keep a database schema for GitHub issues in sync.

Declares the tables that hold a repository's issues, labels and milestones,
diffs them against the live database and previews or applies the DDL in
one transaction.

Usage:
    from github_to_mysql import ConnectionManager, create_schema

    engine = ConnectionManager().connect()
    create_schema(engine, force=True)
"""

__version__ = "0.1.0"

# Config
from github_to_mysql.config.loader import load_settings
from github_to_mysql.config.models import DatabaseSettings

# Factory
from github_to_mysql.factory import ConnectionManager, build_url

# Schema
from github_to_mysql.schema.comparator import validate_schema
from github_to_mysql.schema.definition import get_schema
from github_to_mysql.schema.introspector import SchemaIntrospector
from github_to_mysql.schema.migrate import create_schema, get_migration_statements

__all__ = [
    # Config
    "load_settings",
    "DatabaseSettings",
    # Factory
    "ConnectionManager",
    "build_url",
    # Schema
    "get_schema",
    "get_migration_statements",
    "create_schema",
    "SchemaIntrospector",
    "validate_schema",
]
