"""Shared fixtures: a throwaway SQLite database per test."""

import pytest
from sqlalchemy import inspect

from github_to_mysql.config.models import DatabaseSettings
from github_to_mysql.factory import ConnectionManager


@pytest.fixture
def settings(tmp_path) -> DatabaseSettings:
    """Settings pointing at an empty SQLite file."""
    return DatabaseSettings(name=str(tmp_path / "github.db"))


@pytest.fixture
def manager(settings):
    """ConnectionManager closed after the test."""
    manager = ConnectionManager(settings)
    yield manager
    manager.close()


@pytest.fixture
def engine(manager):
    """SQLite engine with the github_ asset filter."""
    return manager.connect("sqlite")


@pytest.fixture
def table_names(engine):
    """Callable returning all table names currently in the database."""

    def _table_names() -> set[str]:
        with engine.connect() as conn:
            return set(inspect(conn).get_table_names())

    return _table_names
