"""UserRole repository: role assignments per user and site."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agentsites.application.dtos.role import RoleAssignmentResult, SiteUserResult
from agentsites.domain.enums import SiteRole
from agentsites.domain.exceptions import DuplicateAssignmentException
from agentsites.infrastructure.persistence.models.role import UserRole
from agentsites.shared.utils.datetime import ensure_utc


def _orm_to_result(row: UserRole) -> RoleAssignmentResult:
    """Map ORM to application DTO."""
    return RoleAssignmentResult(
        id=row.id,
        user_id=row.user_id,
        role=row.role,
        site_id=row.site_id,
        created_by=row.created_by,
        created_at=ensure_utc(row.created_at),
    )


def _scope(stmt, site_id: str | None):
    if site_id is None:
        return stmt.where(UserRole.site_id.is_(None))
    return stmt.where(UserRole.site_id == site_id)


class UserRoleRepository:
    """User role link table only. Assign/remove and list roles."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_for_user(self, user_id: str) -> list[RoleAssignmentResult]:
        result = await self.db.execute(
            select(UserRole)
            .where(UserRole.user_id == user_id)
            .order_by(UserRole.created_at, UserRole.id)
        )
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def roles_at_site(self, user_id: str, site_id: str) -> list[str]:
        """Role names the user holds at one site (site-scoped rows only)."""
        result = await self.db.execute(
            select(UserRole.role).where(
                UserRole.user_id == user_id, UserRole.site_id == site_id
            )
        )
        return list(result.scalars().all())

    async def is_system_uber_admin(self, user_id: str) -> bool:
        result = await self.db.execute(
            select(UserRole.id).where(
                UserRole.user_id == user_id,
                UserRole.role == SiteRole.UBER_ADMIN.value,
                UserRole.site_id.is_(None),
            )
        )
        return result.first() is not None

    async def list_system_uber_admins(self) -> list[str]:
        """User ids holding a stored system-wide uber_admin row."""
        result = await self.db.execute(
            select(UserRole.user_id)
            .where(
                UserRole.role == SiteRole.UBER_ADMIN.value,
                UserRole.site_id.is_(None),
            )
            .order_by(UserRole.user_id)
        )
        return list(result.scalars().all())

    async def find(
        self, user_id: str, role: str, site_id: str | None
    ) -> RoleAssignmentResult | None:
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
        result = await self.db.execute(_scope(stmt, site_id))
        row = result.scalar_one_or_none()
        return _orm_to_result(row) if row else None

    async def assign(
        self,
        user_id: str,
        role: str,
        site_id: str | None,
        created_by: str | None = None,
    ) -> RoleAssignmentResult:
        """Insert an assignment.

        Raises:
            DuplicateAssignmentException: If the user already holds role at that scope.
        """
        if await self.find(user_id, role, site_id) is not None:
            raise DuplicateAssignmentException(user_id, role, site_id)
        row = UserRole(
            user_id=user_id,
            role=role,
            site_id=site_id,
            created_by=created_by,
        )
        try:
            self.db.add(row)
            await self.db.flush()
            await self.db.refresh(row)
        except IntegrityError:
            raise DuplicateAssignmentException(user_id, role, site_id) from None
        return _orm_to_result(row)

    async def remove(self, user_id: str, role: str, site_id: str | None) -> bool:
        """Delete an assignment; return False if it did not exist."""
        stmt = select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
        result = await self.db.execute(_scope(stmt, site_id))
        row = result.scalar_one_or_none()
        if not row:
            return False
        await self.db.delete(row)
        await self.db.flush()
        return True

    async def list_site_users(self, site_id: str) -> list[SiteUserResult]:
        """Users holding roles at a site, each with their role names."""
        result = await self.db.execute(
            select(UserRole.user_id, UserRole.role)
            .where(UserRole.site_id == site_id)
            .order_by(UserRole.user_id, UserRole.role)
        )
        grouped: dict[str, list[str]] = {}
        for user_id, role in result.all():
            grouped.setdefault(user_id, []).append(role)
        return [SiteUserResult(user_id=u, roles=r) for u, r in grouped.items()]
