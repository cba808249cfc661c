"""initial schema: agent sites, roles, role audit, propagation, site content

Revision ID: 3f1a9c2d7e40
Revises:
Create Date: 2026-02-02 10:14:31.402118

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _site_scoped_table(name: str, *columns: sa.Column | sa.Constraint) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("site_id", sa.String(), nullable=False),
        *columns,
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["site_id"], ["agent_site.id"], ondelete="CASCADE"),
    )
    op.create_index(f"ix_{name}_site_id", name, ["site_id"])


def upgrade() -> None:
    """Upgrade schema - create all tables."""
    op.create_table(
        "agent_site",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("site_slug", sa.String(), nullable=False),
        sa.Column("is_master", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("status", sa.String(), server_default="active", nullable=False),
        sa.Column("seed_status", sa.String(), nullable=True),
        sa.Column("owner_user_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("site_slug"),
        sa.CheckConstraint("status IN ('active', 'inactive')", name="ck_agent_site_status"),
        sa.CheckConstraint(
            "seed_status IS NULL OR seed_status IN ('pending', 'completed')",
            name="ck_agent_site_seed_status",
        ),
    )
    op.create_index("ix_agent_site_owner_user_id", "agent_site", ["owner_user_id"])
    op.create_index(
        "uq_agent_site_single_master",
        "agent_site",
        ["is_master"],
        unique=True,
        postgresql_where=sa.text("is_master"),
    )

    op.create_table(
        "user_role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("site_id", sa.String(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["site_id"], ["agent_site.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "role", "site_id", name="uq_user_role_user_role_site"),
        sa.CheckConstraint(
            "role IN ('uber_admin', 'super_admin', 'content_admin', 'social_admin', 'moderator')",
            name="ck_user_role_role",
        ),
        sa.CheckConstraint(
            "(role = 'uber_admin' AND site_id IS NULL) "
            "OR (role <> 'uber_admin' AND site_id IS NOT NULL)",
            name="ck_user_role_scope",
        ),
    )
    op.create_index("ix_user_role_user_id", "user_role", ["user_id"])
    op.create_index("ix_user_role_site_id", "user_role", ["site_id"])
    op.create_index(
        "uq_user_role_system_wide",
        "user_role",
        ["user_id", "role"],
        unique=True,
        postgresql_where=sa.text("site_id IS NULL"),
    )

    op.create_table(
        "role_audit_log",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("target_user_id", sa.String(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("site_id", sa.String(), nullable=True),
        sa.Column("actor_id", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "action IN ('assigned', 'removed')", name="ck_role_audit_log_action"
        ),
    )
    op.create_index(
        "ix_role_audit_log_target_user_id", "role_audit_log", ["target_user_id"]
    )
    op.create_index("ix_role_audit_log_created_at", "role_audit_log", ["created_at"])

    op.create_table(
        "master_site_update",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("source_site_id", sa.String(), nullable=False),
        sa.Column("update_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=True),
        sa.Column("entity_data", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(), server_default="pending", nullable=False),
        sa.Column("created_by", sa.String(), nullable=False),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("pushed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("target_sites", sa.JSON(), nullable=True),
        sa.Column("failed_sites", sa.JSON(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("retry_of_id", sa.String(), nullable=True),
        sa.Column("restrict_site_ids", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["source_site_id"], ["agent_site.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["retry_of_id"], ["master_site_update.id"], ondelete="SET NULL"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'pushed')",
            name="ck_master_site_update_status",
        ),
        sa.CheckConstraint(
            "update_type IN ('content_item', 'content_category', 'mission_pillar', "
            "'agent_branch', 'utilities_config')",
            name="ck_master_site_update_type",
        ),
    )
    op.create_index(
        "ix_master_site_update_source_site_id", "master_site_update", ["source_site_id"]
    )
    op.create_index("ix_master_site_update_status", "master_site_update", ["status"])

    _site_scoped_table(
        "content_item",
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(), nullable=True),
        sa.Column("strand", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("l2e_points", sa.Integer(), nullable=True),
        sa.Column("featured", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("pinned", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("social_source", sa.String(), nullable=True),
        sa.Column("social_url", sa.String(), nullable=True),
        sa.Column("social_embed_html", sa.Text(), nullable=True),
        sa.Column("l2e_quiz_url", sa.String(), nullable=True),
        sa.Column("l2e_cta_label", sa.String(), nullable=True),
        sa.Column("l2e_cta_url", sa.String(), nullable=True),
        sa.Column("owner_id", sa.String(), nullable=True),
        sa.UniqueConstraint("site_id", "slug", name="uq_content_item_site_slug"),
    )
    _site_scoped_table(
        "content_category",
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("strand", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.UniqueConstraint("site_id", "slug", name="uq_content_category_site_slug"),
    )
    _site_scoped_table(
        "mission_pillar",
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("short_summary", sa.Text(), nullable=True),
        sa.Column("long_context_md", sa.Text(), nullable=True),
        sa.Column("goals_json", sa.JSON(), nullable=True),
        sa.Column("kpis_json", sa.JSON(), nullable=True),
    )
    _site_scoped_table(
        "agent_branch",
        sa.Column("kind", sa.String(), nullable=True),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("short_summary", sa.Text(), nullable=True),
        sa.Column("long_context_md", sa.Text(), nullable=True),
        sa.Column("values_json", sa.JSON(), nullable=True),
        sa.Column("tone", sa.String(), nullable=True),
        sa.Column("audience", sa.String(), nullable=True),
        sa.Column("safety_notes_md", sa.Text(), nullable=True),
    )
    _site_scoped_table(
        "utilities_config",
        sa.Column("content_creation_on", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("teaching_on", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("commercial_on", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("social_on", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.UniqueConstraint("site_id", name="uq_utilities_config_site"),
    )


def downgrade() -> None:
    """Downgrade schema - drop all tables."""
    for name in (
        "utilities_config",
        "agent_branch",
        "mission_pillar",
        "content_category",
        "content_item",
    ):
        op.drop_index(f"ix_{name}_site_id", name)
        op.drop_table(name)
    op.drop_index("ix_master_site_update_status", "master_site_update")
    op.drop_index("ix_master_site_update_source_site_id", "master_site_update")
    op.drop_table("master_site_update")
    op.drop_index("ix_role_audit_log_created_at", "role_audit_log")
    op.drop_index("ix_role_audit_log_target_user_id", "role_audit_log")
    op.drop_table("role_audit_log")
    op.drop_index("uq_user_role_system_wide", "user_role")
    op.drop_index("ix_user_role_site_id", "user_role")
    op.drop_index("ix_user_role_user_id", "user_role")
    op.drop_table("user_role")
    op.drop_index("uq_agent_site_single_master", "agent_site")
    op.drop_index("ix_agent_site_owner_user_id", "agent_site")
    op.drop_table("agent_site")
