"""Target schema for GitHub issues, labels and milestones.

``get_schema()`` builds a new ``MetaData`` on every call.  ``MetaData`` and
``Table`` objects are mutable, so callers must not share one instance
between comparisons.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects import mysql

LABELS_TABLE = "github_labels"
MILESTONES_TABLE = "github_milestones"
ISSUES_TABLE = "github_issues"
ISSUE_LABELS_TABLE = "github_issue_labels"


def _unsigned() -> Integer:
    """Integer rendered as INTEGER UNSIGNED on MySQL."""
    return Integer().with_variant(mysql.INTEGER(unsigned=True), "mysql", "mariadb")


def _id_column() -> Column:
    # GitHub assigns the ids, the database must not generate them
    return Column("id", _unsigned(), primary_key=True, autoincrement=False)


def get_schema() -> MetaData:
    """Build the target schema.

    Returns:
        ``MetaData`` with the labels, milestones, issues and issue-labels
        tables, their indexes and foreign keys.

    Example:
        >>> sorted(get_schema().tables)
        ['github_issue_labels', 'github_issues', 'github_labels', 'github_milestones']
    """
    metadata = MetaData()

    Table(
        LABELS_TABLE,
        metadata,
        _id_column(),
        Column("url", String(255), nullable=False),
        Column("name", String(255), nullable=False, index=True),
        Column("color", String(255), nullable=False),
    )

    Table(
        MILESTONES_TABLE,
        metadata,
        _id_column(),
        Column("title", String(255), nullable=False, index=True),
        Column("description", String(255), nullable=False),
        Column("url", String(255), nullable=False),
        Column("open", Boolean(), nullable=False),
    )

    Table(
        ISSUES_TABLE,
        metadata,
        _id_column(),
        Column("title", Text(), nullable=False),
        Column("open", Boolean(), nullable=False, index=True),
        Column("author", String(255), nullable=False, index=True),
        Column("author_avatar_url", String(255), nullable=True),
        Column("created_at", DateTime(), nullable=False, index=True),
        Column("updated_at", DateTime(), nullable=False, index=True),
        Column("closed_at", DateTime(), nullable=True, index=True),
        Column("is_pull_request", Boolean(), nullable=False, index=True),
        Column(
            "milestone_id",
            _unsigned(),
            ForeignKey(f"{MILESTONES_TABLE}.id"),
            nullable=True,
        ),
    )

    Table(
        ISSUE_LABELS_TABLE,
        metadata,
        Column(
            "issue_id",
            _unsigned(),
            ForeignKey(f"{ISSUES_TABLE}.id", onupdate="CASCADE", ondelete="CASCADE"),
            primary_key=True,
            autoincrement=False,
        ),
        Column(
            "label_id",
            _unsigned(),
            ForeignKey(f"{LABELS_TABLE}.id", onupdate="CASCADE", ondelete="CASCADE"),
            primary_key=True,
            autoincrement=False,
        ),
    )

    return metadata


def get_expected_columns(metadata: MetaData | None = None) -> dict[str, set[str]]:
    """Map each table of the target schema to its column names.

    Args:
        metadata: Schema to read (default: a fresh ``get_schema()``).

    Returns:
        Dict mapping table name to set of column names, the shape
        ``validate_schema()`` expects.
    """
    if metadata is None:
        metadata = get_schema()
    return {
        name: {column.name for column in table.columns}
        for name, table in metadata.tables.items()
    }
