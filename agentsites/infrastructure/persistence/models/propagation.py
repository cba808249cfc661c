"""Master site update ORM model (propagation record)."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from agentsites.domain.enums import PropagationEntityType, PropagationStatus
from agentsites.infrastructure.persistence.database import Base
from agentsites.infrastructure.persistence.models.mixins import CuidMixin
from agentsites.shared.utils.datetime import utc_now

_STATUS_VALUES = ", ".join(f"'{s}'" for s in PropagationStatus.values())
_TYPE_VALUES = ", ".join(f"'{t}'" for t in PropagationEntityType.values())


class MasterSiteUpdate(CuidMixin, Base):
    """Propagation record. Table: master_site_update.

    entity_data is a full snapshot of the master entity at enqueue time.
    target_sites / failed_sites are filled when the record is pushed.
    """

    __tablename__ = "master_site_update"

    source_site_id: Mapped[str] = mapped_column(
        String, ForeignKey("agent_site.id", ondelete="CASCADE"), nullable=False, index=True
    )
    update_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String, nullable=True)
    entity_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=PropagationStatus.PENDING.value, index=True
    )
    created_by: Mapped[str] = mapped_column(String, nullable=False)
    approved_by: Mapped[str | None] = mapped_column(String, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    pushed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    target_sites: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    failed_sites: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    retry_of_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("master_site_update.id", ondelete="SET NULL"), nullable=True
    )
    restrict_site_ids: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_master_site_update_status"),
        CheckConstraint(
            f"update_type IN ({_TYPE_VALUES})", name="ck_master_site_update_type"
        ),
    )
