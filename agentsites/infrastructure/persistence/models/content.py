"""Propagatable per-site entities: content, categories, pillars, branches, utilities."""

from typing import Any

from sqlalchemy import JSON, Boolean, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from agentsites.infrastructure.persistence.database import Base
from agentsites.infrastructure.persistence.models.mixins import SiteScopedModel


class ContentItem(SiteScopedModel, Base):
    """Content item. Table: content_item. Natural key (site_id, slug)."""

    __tablename__ = "content_item"

    slug: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str | None] = mapped_column(String, nullable=True)
    strand: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str | None] = mapped_column(String, nullable=True)
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    l2e_points: Mapped[int | None] = mapped_column(Integer, nullable=True)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    social_source: Mapped[str | None] = mapped_column(String, nullable=True)
    social_url: Mapped[str | None] = mapped_column(String, nullable=True)
    social_embed_html: Mapped[str | None] = mapped_column(Text, nullable=True)
    l2e_quiz_url: Mapped[str | None] = mapped_column(String, nullable=True)
    l2e_cta_label: Mapped[str | None] = mapped_column(String, nullable=True)
    l2e_cta_url: Mapped[str | None] = mapped_column(String, nullable=True)
    owner_id: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (UniqueConstraint("site_id", "slug", name="uq_content_item_site_slug"),)


class ContentCategory(SiteScopedModel, Base):
    """Content category. Table: content_category. Natural key (site_id, slug)."""

    __tablename__ = "content_category"

    name: Mapped[str] = mapped_column(String, nullable=False)
    slug: Mapped[str] = mapped_column(String, nullable=False)
    strand: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("site_id", "slug", name="uq_content_category_site_slug"),
    )


class MissionPillar(SiteScopedModel, Base):
    """Mission pillar. Table: mission_pillar. Matched by (site_id, display_name)."""

    __tablename__ = "mission_pillar"

    display_name: Mapped[str] = mapped_column(String, nullable=False)
    short_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    long_context_md: Mapped[str | None] = mapped_column(Text, nullable=True)
    goals_json: Mapped[Any | None] = mapped_column(JSON, nullable=True)
    kpis_json: Mapped[Any | None] = mapped_column(JSON, nullable=True)


class AgentBranch(SiteScopedModel, Base):
    """Agent branch (persona facet). Table: agent_branch. Matched by (site_id, display_name)."""

    __tablename__ = "agent_branch"

    kind: Mapped[str | None] = mapped_column(String, nullable=True)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    short_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    long_context_md: Mapped[str | None] = mapped_column(Text, nullable=True)
    values_json: Mapped[Any | None] = mapped_column(JSON, nullable=True)
    tone: Mapped[str | None] = mapped_column(String, nullable=True)
    audience: Mapped[str | None] = mapped_column(String, nullable=True)
    safety_notes_md: Mapped[str | None] = mapped_column(Text, nullable=True)


class UtilitiesConfig(SiteScopedModel, Base):
    """Per-site feature switches. Table: utilities_config. At most one row per site."""

    __tablename__ = "utilities_config"

    content_creation_on: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    teaching_on: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    commercial_on: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    social_on: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (UniqueConstraint("site_id", name="uq_utilities_config_site"),)
