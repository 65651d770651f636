"""Create app_versions table

Revision ID: a3c1e7d20b91
Revises:
Create Date: 2026-10-17

One row per release artifact per platform. The composite index serves the
"latest published release for a platform" lookup.
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "a3c1e7d20b91"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "app_versions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("version", sa.String(length=64), nullable=False),
        sa.Column("platform", sa.String(length=20), nullable=False),
        sa.Column("distribution_type", sa.String(length=10), nullable=True, server_default="url"),
        sa.Column("package_url", sa.Text, nullable=True),
        sa.Column("oss_object_key", sa.String(length=512), nullable=True),
        sa.Column("release_notes", sa.Text, nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("is_force_update", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("min_supported_version", sa.String(length=64), nullable=True),
        sa.Column("file_size", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("file_hash", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(length=128), nullable=True),
    )
    op.create_index("ix_app_versions_platform", "app_versions", ["platform"])
    op.create_index("ix_app_versions_status", "app_versions", ["status"])
    op.create_index(
        "ix_app_versions_platform_status_created",
        "app_versions",
        ["platform", "status", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_app_versions_platform_status_created", table_name="app_versions")
    op.drop_index("ix_app_versions_status", table_name="app_versions")
    op.drop_index("ix_app_versions_platform", table_name="app_versions")
    op.drop_table("app_versions")
