"""Role authorization gate: rank-checked role assignment, revocation, and audit reads.

Every mutation is checked against the role hierarchy, then written together
with its audit entry in the caller's transaction.
"""

from __future__ import annotations

from agentsites.application.dtos.actor import Actor
from agentsites.application.dtos.role import (
    RoleAssignmentResult,
    RoleAuditEntryResult,
    SiteUserResult,
)
from agentsites.application.interfaces.repositories import (
    IRoleAuditRepository,
    ISiteRepository,
    IUserRoleRepository,
)
from agentsites.domain import role_hierarchy
from agentsites.domain.enums import RoleAuditAction, SiteRole
from agentsites.domain.exceptions import (
    NotAuthorizedException,
    PermissionDeniedException,
    ResourceNotFoundException,
    ValidationException,
)
from agentsites.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _parse_role(role: SiteRole | str) -> SiteRole:
    try:
        return SiteRole(role)
    except ValueError:
        raise ValidationException(f"Unknown role: {role}", field="role") from None


class RoleAuthorizationService:
    """Checks actor rank before any role change and records every change."""

    def __init__(
        self,
        user_role_repo: IUserRoleRepository,
        audit_repo: IRoleAuditRepository,
        site_repo: ISiteRepository,
        *,
        audit_default_limit: int = 50,
        audit_max_limit: int = 500,
    ) -> None:
        self.user_role_repo = user_role_repo
        self.audit_repo = audit_repo
        self.site_repo = site_repo
        self.audit_default_limit = audit_default_limit
        self.audit_max_limit = audit_max_limit

    async def actor_rank_at_site(self, actor: Actor, site_id: str | None) -> int:
        """Effective rank of the actor at site_id (100 for Uber Admins, 0 for no site)."""
        if actor.is_uber_admin:
            return role_hierarchy.UBER_ADMIN_RANK
        if site_id is None:
            return 0
        roles = await self.user_role_repo.roles_at_site(actor.user_id, site_id)
        return role_hierarchy.effective_rank(roles)

    async def assignable_roles_for(
        self, actor: Actor, site_id: str | None
    ) -> list[SiteRole]:
        """Roles the actor may grant at site_id, highest rank first."""
        if site_id is not None:
            await self._require_site(site_id)
        rank = await self.actor_rank_at_site(actor, site_id)
        return role_hierarchy.assignable_roles(rank, actor.is_uber_admin)

    async def _require_site(self, site_id: str) -> None:
        if await self.site_repo.get(site_id) is None:
            raise ResourceNotFoundException("agent_site", site_id)

    async def _validate_scope(self, role: SiteRole, site_id: str | None) -> None:
        if role is SiteRole.UBER_ADMIN:
            if site_id is not None:
                raise ValidationException(
                    "uber_admin is system-wide and cannot be scoped to a site",
                    field="site_id",
                )
            return
        if site_id is None:
            raise ValidationException(
                f"Role '{role.value}' must be scoped to a site", field="site_id"
            )
        await self._require_site(site_id)

    async def request_assign(
        self,
        actor: Actor,
        target_user_id: str,
        role: SiteRole | str,
        site_id: str | None,
    ) -> RoleAssignmentResult:
        """Grant role to target_user_id at site_id and append an 'assigned' audit entry.

        Raises:
            ValidationException: Unknown role or wrong scope for the role.
            ResourceNotFoundException: site_id does not exist.
            PermissionDeniedException: Actor's rank does not exceed the role's rank.
            DuplicateAssignmentException: The assignment already exists.
        """
        target_role = _parse_role(role)
        await self._validate_scope(target_role, site_id)
        rank = await self.actor_rank_at_site(actor, site_id)
        if not role_hierarchy.can_assign(
            rank, target_role, actor_is_uber_admin=actor.is_uber_admin
        ):
            raise PermissionDeniedException("assign", target_role.value, rank, site_id)
        assignment = await self.user_role_repo.assign(
            target_user_id, target_role.value, site_id, created_by=actor.user_id
        )
        await self.audit_repo.append(
            target_user_id=target_user_id,
            action=RoleAuditAction.ASSIGNED,
            role=target_role.value,
            site_id=site_id,
            actor_id=actor.user_id,
        )
        logger.info(
            "Role assigned: role=%s user=%s site=%s by=%s",
            target_role.value,
            target_user_id,
            site_id,
            actor.user_id,
        )
        return assignment

    async def request_revoke(
        self,
        actor: Actor,
        target_user_id: str,
        role: SiteRole | str,
        site_id: str | None,
    ) -> None:
        """Remove role from target_user_id at site_id and append a 'removed' audit entry.

        Raises:
            ValidationException: Unknown role, wrong scope, or an Uber Admin
                revoking their own uber_admin.
            PermissionDeniedException: Actor's rank does not exceed the role's rank.
            ResourceNotFoundException: The assignment does not exist.
        """
        target_role = _parse_role(role)
        await self._validate_scope(target_role, site_id)
        rank = await self.actor_rank_at_site(actor, site_id)
        if not role_hierarchy.can_revoke(
            rank, target_role, actor_is_uber_admin=actor.is_uber_admin
        ):
            raise PermissionDeniedException("revoke", target_role.value, rank, site_id)
        if target_role is SiteRole.UBER_ADMIN and target_user_id == actor.user_id:
            raise ValidationException(
                "You cannot remove your own Uber Admin role", field="user_id"
            )
        removed = await self.user_role_repo.remove(
            target_user_id, target_role.value, site_id
        )
        if not removed:
            raise ResourceNotFoundException(
                "role_assignment",
                f"{target_user_id}:{target_role.value}@{site_id or 'system'}",
            )
        await self.audit_repo.append(
            target_user_id=target_user_id,
            action=RoleAuditAction.REMOVED,
            role=target_role.value,
            site_id=site_id,
            actor_id=actor.user_id,
        )
        logger.info(
            "Role removed: role=%s user=%s site=%s by=%s",
            target_role.value,
            target_user_id,
            site_id,
            actor.user_id,
        )

    async def list_audit(
        self, actor: Actor, target_user_id: str, limit: int | None = None
    ) -> list[RoleAuditEntryResult]:
        """Most recent audit entries for target_user_id (Uber Admins or the user themself)."""
        if not actor.is_uber_admin and actor.user_id != target_user_id:
            raise NotAuthorizedException(
                "Only Uber Admins may read another user's role history"
            )
        if limit is None:
            limit = self.audit_default_limit
        limit = max(1, min(limit, self.audit_max_limit))
        return await self.audit_repo.list_for_user(target_user_id, limit)

    async def list_user_roles(
        self, actor: Actor, target_user_id: str
    ) -> list[RoleAssignmentResult]:
        """All assignments of target_user_id (Uber Admins or the user themself)."""
        if not actor.is_uber_admin and actor.user_id != target_user_id:
            raise NotAuthorizedException("Only Uber Admins may list another user's roles")
        return await self.user_role_repo.list_for_user(target_user_id)

    async def list_site_users(self, actor: Actor, site_id: str) -> list[SiteUserResult]:
        """Users holding roles at site_id; requires moderator rank or above there."""
        await self._require_site(site_id)
        rank = await self.actor_rank_at_site(actor, site_id)
        if rank < role_hierarchy.rank_of(SiteRole.MODERATOR):
            raise NotAuthorizedException("A role at this site is required to list its users")
        return await self.user_role_repo.list_site_users(site_id)
