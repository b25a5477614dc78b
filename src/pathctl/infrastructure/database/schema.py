"""SQLAlchemy Core table definitions for the pathctl database.

Referential integrity is enforced by SQLite foreign keys (enabled per
connection in :mod:`engine`). Edges and items deliberately carry no
``ON DELETE CASCADE``: deleting a point they reference fails, which the
service layer reports as a not-deletable point.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", Text, nullable=False, unique=True),
    Column("name", Text),
    Column("avatar", Text),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

points = Table(
    "points",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False, unique=True),
    Column("summary", Text),
    Column("created_user", Integer, ForeignKey("users.id")),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
    Column("summary_at", Text),
)

edges = Table(
    "edges",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("origin_id", Integer, ForeignKey("points.id"), nullable=False),
    Column("destination_id", Integer, ForeignKey("points.id"), nullable=False),
    Column("created_at", Text, nullable=False),
    UniqueConstraint("origin_id", "destination_id", name="uq_edges_pair"),
    CheckConstraint("origin_id <> destination_id", name="ck_edges_distinct"),
)

projects = Table(
    "projects",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("created_user", Integer, ForeignKey("users.id")),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

project_points = Table(
    "project_points",
    metadata,
    Column("project_id", Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
    Column("point_id", Integer, ForeignKey("points.id", ondelete="CASCADE"), nullable=False),
    PrimaryKeyConstraint("project_id", "point_id"),
)

# Dependent items (memos) are owned elsewhere; only their ordering lives here.
point_items = Table(
    "point_items",
    metadata,
    Column("point_id", Integer, ForeignKey("points.id"), nullable=False),
    Column("item_id", Integer, nullable=False),
    Column("position", Integer, nullable=False),
    PrimaryKeyConstraint("point_id", "item_id"),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_edges_origin", edges.c.origin_id)
Index("ix_edges_destination", edges.c.destination_id)
Index("ix_project_points_point", project_points.c.point_id)
Index("ix_points_updated", points.c.updated_at)
