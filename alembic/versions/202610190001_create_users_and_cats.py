"""Create users and cats tables

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None

user_role_enum = sa.Enum(
    "user",
    "admin",
    name="user_role",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_name", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", user_role_enum, nullable=False, server_default="user"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_users_email", "users", ["email"])

    # owner_id has no foreign key: cats outlive their owners
    op.create_table(
        "cats",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("cat_name", sa.String(length=128), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("filename", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("birthdate", sa.Date(), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lng", sa.Float(), nullable=False),
        sa.Column("owner_id", sa.String(length=36), nullable=False),
        sa.Column("owner_user_name", sa.String(length=128), nullable=False, server_default=""),
        sa.Column("owner_email", sa.String(length=255), nullable=False, server_default=""),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_cats_owner_id", "cats", ["owner_id"])
    op.create_index("ix_cats_lat_lng", "cats", ["lat", "lng"])


def downgrade() -> None:
    op.drop_index("ix_cats_lat_lng", "cats")
    op.drop_index("ix_cats_owner_id", "cats")
    op.drop_table("cats")
    op.drop_index("ix_users_email", "users")
    op.drop_table("users")
    user_role_enum.drop(op.get_bind(), checkfirst=True)
