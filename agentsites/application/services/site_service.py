"""Agent site management: creation, listing, master designation, status, seeding."""

from __future__ import annotations

from collections.abc import Callable

from agentsites.application.dtos.actor import Actor
from agentsites.application.dtos.site import SeedResult, SiteResult
from agentsites.application.interfaces.repositories import (
    IRoleAuditRepository,
    ISiteEntityRepository,
    ISiteRepository,
    IUserRoleRepository,
)
from agentsites.domain import role_hierarchy
from agentsites.domain.enums import (
    PropagationEntityType,
    RoleAuditAction,
    SeedStatus,
    SiteRole,
    SiteStatus,
)
from agentsites.domain.exceptions import (
    NotAuthorizedException,
    ResourceNotFoundException,
    ValidationException,
)
from agentsites.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

# Categories before items so seeded items reference existing category slugs.
SEED_ORDER: tuple[PropagationEntityType, ...] = (
    PropagationEntityType.CONTENT_CATEGORY,
    PropagationEntityType.MISSION_PILLAR,
    PropagationEntityType.AGENT_BRANCH,
    PropagationEntityType.CONTENT_ITEM,
    PropagationEntityType.UTILITIES_CONFIG,
)


class SiteService:
    """Site lifecycle. Master designation and status are Uber Admin only."""

    def __init__(
        self,
        site_repo: ISiteRepository,
        user_role_repo: IUserRoleRepository,
        audit_repo: IRoleAuditRepository,
        entity_repo_factory: Callable[[PropagationEntityType], ISiteEntityRepository],
    ) -> None:
        self.site_repo = site_repo
        self.user_role_repo = user_role_repo
        self.audit_repo = audit_repo
        self.entity_repo_factory = entity_repo_factory

    async def create_site(
        self,
        actor: Actor,
        display_name: str,
        site_slug: str,
        owner_user_id: str | None = None,
        seed_from_master: bool = False,
    ) -> SiteResult:
        """Create a branch site; the owner is granted super_admin on it.

        Non-Uber Admins can only create sites they own.

        Raises:
            NotAuthorizedException: Non-Uber Admin creating a site for someone else.
            SiteAlreadyExistsException: site_slug is taken.
        """
        if not display_name.strip():
            raise ValidationException("Site name is required", field="display_name")
        if actor.is_uber_admin:
            owner = owner_user_id
        else:
            if owner_user_id is not None and owner_user_id != actor.user_id:
                raise NotAuthorizedException(
                    "Only Uber Admins can create sites for other users"
                )
            owner = actor.user_id
        site = await self.site_repo.create_site(display_name.strip(), site_slug, owner)
        if owner is not None:
            await self.user_role_repo.assign(
                owner, SiteRole.SUPER_ADMIN.value, site.id, created_by=actor.user_id
            )
            await self.audit_repo.append(
                target_user_id=owner,
                action=RoleAuditAction.ASSIGNED,
                role=SiteRole.SUPER_ADMIN.value,
                site_id=site.id,
                actor_id=actor.user_id,
            )
        logger.info("Site created: id=%s slug=%s owner=%s", site.id, site_slug, owner)
        if seed_from_master:
            await self._seed(site)
            refreshed = await self.site_repo.get(site.id)
            if refreshed is not None:
                site = refreshed
        return site

    async def list_sites(self, actor: Actor) -> list[SiteResult]:
        """Uber Admins see every site (master first); others see their own."""
        if actor.is_uber_admin:
            return await self.site_repo.list_all()
        return await self.site_repo.list_for_user(actor.user_id)

    async def get_site(self, site_id: str) -> SiteResult:
        site = await self.site_repo.get(site_id)
        if site is None:
            raise ResourceNotFoundException("agent_site", site_id)
        return site

    async def set_master(self, actor: Actor, site_id: str) -> SiteResult:
        """Make site_id the only master site."""
        if not actor.is_uber_admin:
            raise NotAuthorizedException()
        site = await self.site_repo.set_master(site_id)
        if site is None:
            raise ResourceNotFoundException("agent_site", site_id)
        logger.info("Master site set: id=%s by=%s", site_id, actor.user_id)
        return site

    async def update_status(
        self, actor: Actor, site_id: str, status: SiteStatus | str
    ) -> SiteResult:
        if not actor.is_uber_admin:
            raise NotAuthorizedException()
        try:
            new_status = SiteStatus(status)
        except ValueError:
            raise ValidationException(f"Invalid site status: {status}", field="status") from None
        site = await self.site_repo.update_status(site_id, new_status)
        if site is None:
            raise ResourceNotFoundException("agent_site", site_id)
        return site

    async def seed_from_master(self, actor: Actor, site_id: str) -> SeedResult:
        """Copy the master template into site_id (idempotent upserts).

        Allowed for Uber Admins and the site's super_admins.

        Raises:
            ResourceNotFoundException: Site or master site does not exist.
            NotAuthorizedException: Actor lacks super_admin at the site.
            ValidationException: site_id is the master site.
        """
        site = await self.get_site(site_id)
        if not actor.is_uber_admin:
            roles = await self.user_role_repo.roles_at_site(actor.user_id, site_id)
            if not role_hierarchy.has_minimum_role(roles, SiteRole.SUPER_ADMIN):
                raise NotAuthorizedException("Super Admin role at this site required")
        return await self._seed(site)

    async def _seed(self, site: SiteResult) -> SeedResult:
        # Runs in the caller's transaction: on error the pending marker rolls back too.
        master = await self.site_repo.get_master()
        if master is None:
            raise ResourceNotFoundException("agent_site", "master")
        if master.id == site.id:
            raise ValidationException("The master site cannot be seeded from itself")
        await self.site_repo.set_seed_status(site.id, SeedStatus.PENDING)
        counts: dict[str, int] = {}
        for entity_type in SEED_ORDER:
            repo = self.entity_repo_factory(entity_type)
            rows = await repo.list_for_site(master.id)
            for row in rows:
                await repo.upsert_by_natural_key(site.id, repo.to_snapshot(row))
            counts[entity_type.value] = len(rows)
        await self.site_repo.set_seed_status(site.id, SeedStatus.COMPLETED)
        logger.info("Site seeded from master: site=%s counts=%s", site.id, counts)
        return SeedResult(site_id=site.id, master_site_id=master.id, counts=counts)
