"""Configuration management: settings model and loader.

Usage:
    >>> from github_to_mysql.config import load_settings, DatabaseSettings
"""

from github_to_mysql.config.loader import load_settings
from github_to_mysql.config.models import DatabaseSettings

__all__ = ["load_settings", "DatabaseSettings"]
