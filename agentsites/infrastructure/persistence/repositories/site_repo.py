"""Agent site repository: lookup, listing, master designation, status."""

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agentsites.application.dtos.site import SiteResult
from agentsites.domain.enums import SeedStatus, SiteStatus
from agentsites.domain.exceptions import SiteAlreadyExistsException
from agentsites.infrastructure.persistence.models.role import UserRole
from agentsites.infrastructure.persistence.models.site import AgentSite
from agentsites.infrastructure.persistence.repositories.base import BaseRepository
from agentsites.shared.utils.datetime import ensure_utc


def _orm_to_result(row: AgentSite) -> SiteResult:
    """Map ORM to application DTO."""
    return SiteResult(
        id=row.id,
        display_name=row.display_name,
        site_slug=row.site_slug,
        is_master=row.is_master,
        status=row.status,
        seed_status=row.seed_status,
        owner_user_id=row.owner_user_id,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


class SiteRepository(BaseRepository[AgentSite]):
    """Agent site persistence. Single-master invariant is kept by set_master."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AgentSite)

    async def get(self, site_id: str) -> SiteResult | None:
        row = await self.get_by_id(site_id)
        return _orm_to_result(row) if row else None

    async def get_by_slug(self, site_slug: str) -> SiteResult | None:
        result = await self.db.execute(
            select(AgentSite).where(AgentSite.site_slug == site_slug)
        )
        row = result.scalar_one_or_none()
        return _orm_to_result(row) if row else None

    async def get_master(self) -> SiteResult | None:
        result = await self.db.execute(
            select(AgentSite).where(AgentSite.is_master.is_(True))
        )
        row = result.scalar_one_or_none()
        return _orm_to_result(row) if row else None

    async def list_all(self) -> list[SiteResult]:
        """All sites, master first then by display name."""
        result = await self.db.execute(
            select(AgentSite).order_by(
                AgentSite.is_master.desc(), AgentSite.display_name, AgentSite.id
            )
        )
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def list_for_user(self, user_id: str) -> list[SiteResult]:
        """Sites the user owns or holds a site-scoped role at."""
        role_site_ids = select(UserRole.site_id).where(
            UserRole.user_id == user_id, UserRole.site_id.is_not(None)
        )
        result = await self.db.execute(
            select(AgentSite)
            .where(
                or_(
                    AgentSite.owner_user_id == user_id,
                    AgentSite.id.in_(role_site_ids),
                )
            )
            .order_by(AgentSite.display_name, AgentSite.id)
        )
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def list_branch_sites(
        self, restrict_to: list[str] | None = None
    ) -> list[SiteResult]:
        """Non-master sites ordered by display name; optionally restricted to given ids."""
        stmt = select(AgentSite).where(AgentSite.is_master.is_(False))
        if restrict_to is not None:
            stmt = stmt.where(AgentSite.id.in_(restrict_to))
        result = await self.db.execute(
            stmt.order_by(AgentSite.display_name, AgentSite.id)
        )
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def create_site(
        self,
        display_name: str,
        site_slug: str,
        owner_user_id: str | None = None,
    ) -> SiteResult:
        """Insert a non-master active site.

        Raises:
            SiteAlreadyExistsException: If site_slug is taken.
        """
        if await self.get_by_slug(site_slug) is not None:
            raise SiteAlreadyExistsException(site_slug)
        row = AgentSite(
            display_name=display_name,
            site_slug=site_slug,
            is_master=False,
            status=SiteStatus.ACTIVE.value,
            owner_user_id=owner_user_id,
        )
        try:
            row = await self.create(row)
        except IntegrityError:
            raise SiteAlreadyExistsException(site_slug) from None
        return _orm_to_result(row)

    async def set_master(self, site_id: str) -> SiteResult | None:
        """Clear the current master and mark site_id as master (caller's transaction).

        Returns None if site_id does not exist (nothing is changed).
        """
        row = await self.get_by_id(site_id)
        if row is None:
            return None
        await self.db.execute(
            update(AgentSite)
            .where(AgentSite.is_master.is_(True), AgentSite.id != site_id)
            .values(is_master=False)
        )
        await self.db.flush()
        row.is_master = True
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    async def update_status(self, site_id: str, status: SiteStatus) -> SiteResult | None:
        row = await self.get_by_id(site_id)
        if row is None:
            return None
        row.status = status.value
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    async def set_seed_status(self, site_id: str, seed_status: SeedStatus) -> None:
        row = await self.get_by_id(site_id)
        if row is None:
            return
        row.seed_status = seed_status.value
        await self.db.flush()
