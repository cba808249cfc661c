"""Role assignment and role audit ORM models.

user_role holds one row per (user, role, site); uber_admin rows are
system-wide (site_id NULL). role_audit_log is append-only.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Connection,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    event,
    text,
)
from sqlalchemy.orm import Mapped, Mapper, mapped_column
from sqlalchemy.sql import func

from agentsites.domain.enums import RoleAuditAction, SiteRole
from agentsites.infrastructure.persistence.database import Base
from agentsites.infrastructure.persistence.models.mixins import CuidMixin
from agentsites.shared.utils.datetime import utc_now

_ROLE_VALUES = ", ".join(f"'{r}'" for r in SiteRole.values())
_ACTION_VALUES = ", ".join(f"'{a}'" for a in RoleAuditAction.values())


class UserRole(CuidMixin, Base):
    """Role assignment. Table: user_role. uber_admin iff site_id IS NULL."""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    role: Mapped[str] = mapped_column(String, nullable=False)
    site_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("agent_site.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(f"role IN ({_ROLE_VALUES})", name="ck_user_role_role"),
        CheckConstraint(
            "(role = 'uber_admin' AND site_id IS NULL) "
            "OR (role <> 'uber_admin' AND site_id IS NOT NULL)",
            name="ck_user_role_scope",
        ),
        UniqueConstraint("user_id", "role", "site_id", name="uq_user_role_user_role_site"),
        # NULL site_id never collides under the unique constraint above.
        Index(
            "uq_user_role_system_wide",
            "user_id",
            "role",
            unique=True,
            postgresql_where=text("site_id IS NULL"),
            sqlite_where=text("site_id IS NULL"),
        ),
    )


class RoleAuditLog(CuidMixin, Base):
    """Role audit entry. Who assigned/removed which role for whom. No update/delete."""

    __tablename__ = "role_audit_log"

    target_user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    action: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False)
    site_id: Mapped[str | None] = mapped_column(String, nullable=True)
    actor_id: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        CheckConstraint(f"action IN ({_ACTION_VALUES})", name="ck_role_audit_log_action"),
    )


@event.listens_for(RoleAuditLog, "before_update")
def _prevent_role_audit_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: RoleAuditLog
) -> None:
    """Role audit entries are append-only; updates are forbidden."""
    raise ValueError("Role audit entries are immutable and cannot be updated.")


@event.listens_for(RoleAuditLog, "before_delete")
def _prevent_role_audit_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: RoleAuditLog
) -> None:
    """Role audit entries cannot be deleted."""
    raise ValueError("Role audit entries cannot be deleted.")
