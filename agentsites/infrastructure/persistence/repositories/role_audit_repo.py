"""Role audit repository. Append-only; newest-first reads."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agentsites.application.dtos.role import RoleAuditEntryResult
from agentsites.domain.enums import RoleAuditAction
from agentsites.infrastructure.persistence.models.role import RoleAuditLog
from agentsites.shared.utils.datetime import ensure_utc
from agentsites.shared.utils.generators import generate_cuid


def _orm_to_result(row: RoleAuditLog) -> RoleAuditEntryResult:
    """Map ORM to application DTO."""
    return RoleAuditEntryResult(
        id=row.id,
        target_user_id=row.target_user_id,
        action=row.action,
        role=row.role,
        site_id=row.site_id,
        actor_id=row.actor_id,
        created_at=ensure_utc(row.created_at),
    )


class RoleAuditRepository:
    """Append-only role audit repository. No update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def append(
        self,
        *,
        target_user_id: str,
        action: RoleAuditAction,
        role: str,
        site_id: str | None,
        actor_id: str,
    ) -> RoleAuditEntryResult:
        """Append one audit entry; return created record."""
        row = RoleAuditLog(
            id=generate_cuid(),
            target_user_id=target_user_id,
            action=action.value,
            role=role,
            site_id=site_id,
            actor_id=actor_id,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    async def list_for_user(
        self, target_user_id: str, limit: int
    ) -> list[RoleAuditEntryResult]:
        """Most recent entries first."""
        result = await self.db.execute(
            select(RoleAuditLog)
            .where(RoleAuditLog.target_user_id == target_user_id)
            .order_by(RoleAuditLog.created_at.desc(), RoleAuditLog.id.desc())
            .limit(limit)
        )
        return [_orm_to_result(r) for r in result.scalars().all()]
