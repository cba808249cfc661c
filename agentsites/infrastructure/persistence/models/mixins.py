"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TimestampMixin, SiteScopedMixin, and the combined
SiteScopedModel used by every propagatable entity.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from agentsites.shared.utils.datetime import utc_now
from agentsites.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (timezone-aware).

    Python-side defaults keep sub-second ordering on every backend; the
    server defaults cover rows written outside the ORM.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            nullable=False,
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            onupdate=utc_now,
            nullable=False,
        )


class SiteScopedMixin:
    """Mixin for per-site rows. Provides site_id FK to agent_site with CASCADE delete."""

    @declared_attr
    def site_id(cls) -> Mapped[str]:
        return mapped_column(
            String,
            ForeignKey("agent_site.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class SiteScopedModel(CuidMixin, SiteScopedMixin, TimestampMixin):
    """Combined mixin: CUID + site_id + created_at/updated_at."""

    __abstract__ = True
