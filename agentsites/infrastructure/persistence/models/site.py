"""Agent site ORM model. One row per tenant site; exactly one may be master."""

from sqlalchemy import Boolean, CheckConstraint, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from agentsites.domain.enums import SeedStatus, SiteStatus
from agentsites.infrastructure.persistence.database import Base
from agentsites.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
)

_STATUS_VALUES = ", ".join(f"'{s}'" for s in SiteStatus.values())
_SEED_VALUES = ", ".join(f"'{s}'" for s in SeedStatus.values())


class AgentSite(CuidMixin, TimestampMixin, Base):
    """Agent site. Table: agent_site. Unique site_slug; at most one is_master row."""

    __tablename__ = "agent_site"

    display_name: Mapped[str] = mapped_column(String, nullable=False)
    site_slug: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    is_master: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=SiteStatus.ACTIVE.value
    )
    seed_status: Mapped[str | None] = mapped_column(String, nullable=True)
    owner_user_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_agent_site_status"),
        CheckConstraint(
            f"seed_status IS NULL OR seed_status IN ({_SEED_VALUES})",
            name="ck_agent_site_seed_status",
        ),
        Index(
            "uq_agent_site_single_master",
            "is_master",
            unique=True,
            postgresql_where=text("is_master"),
            sqlite_where=text("is_master = 1"),
        ),
    )
