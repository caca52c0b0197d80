"""Pydantic models for database configuration."""

from pydantic import BaseModel


class DatabaseSettings(BaseModel):
    """Connection parameters for the target database.

    Example:
        >>> settings = DatabaseSettings(name="github")
        >>> settings.user, settings.port
        ('root', 3306)
    """

    name: str
    user: str = "root"
    password: str = ""
    host: str = "localhost"
    port: int = 3306
    charset: str = "utf8mb4"
    table_prefix: str = "github_"  # Only tables with this prefix are introspected
