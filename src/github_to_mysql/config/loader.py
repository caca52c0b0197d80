"""Settings loader: environment variables with an optional TOML file."""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path

from github_to_mysql.config.models import DatabaseSettings

# Settings field -> environment variable
ENV_VARS = {
    "name": "DB_NAME",
    "user": "DB_USER",
    "password": "DB_PASSWORD",
    "host": "DB_HOST",
    "port": "DB_PORT",
}


def _load_file(config_path: Path) -> dict:
    """Read the ``[database]`` table from a TOML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Database config not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return dict(data.get("database", {}))


def load_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DatabaseSettings:
    """Load database settings.

    Values come from the ``[database]`` table of *config_path* (when given)
    and are then overridden by the ``DB_*`` environment variables.  Empty
    environment values count as unset, so ``DB_USER=""`` still yields the
    default ``root``.

    Args:
        config_path: Optional TOML file with a ``[database]`` table.
        environ: Mapping to read variables from (default: ``os.environ``).

    Returns:
        Validated ``DatabaseSettings``.

    Raises:
        FileNotFoundError: If *config_path* is given but does not exist.
        pydantic.ValidationError: If no database name is configured or a
            value has the wrong type (e.g. a non-numeric ``DB_PORT``).
    """
    if environ is None:
        environ = os.environ

    values: dict = {}
    if config_path is not None:
        values.update(_load_file(Path(config_path)))

    for field_name, var in ENV_VARS.items():
        value = environ.get(var)
        if value:
            values[field_name] = value

    return DatabaseSettings(**values)
