"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill.
All types reference application DTOs or domain types only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from agentsites.application.dtos.propagation import PropagationRecordResult
    from agentsites.application.dtos.role import (
        RoleAssignmentResult,
        RoleAuditEntryResult,
        SiteUserResult,
    )
    from agentsites.application.dtos.site import SiteResult
    from agentsites.domain.entities.propagation import PropagationRecordEntity
    from agentsites.domain.enums import (
        PropagationEntityType,
        PropagationStatus,
        RoleAuditAction,
        SeedStatus,
        SiteStatus,
    )


class ISiteRepository(Protocol):
    """Protocol for agent site repository."""

    async def get(self, site_id: str) -> SiteResult | None: ...

    async def get_master(self) -> SiteResult | None: ...

    async def list_all(self) -> list[SiteResult]: ...

    async def list_for_user(self, user_id: str) -> list[SiteResult]: ...

    async def list_branch_sites(
        self, restrict_to: list[str] | None = None
    ) -> list[SiteResult]: ...

    async def create_site(
        self, display_name: str, site_slug: str, owner_user_id: str | None = None
    ) -> SiteResult: ...

    async def set_master(self, site_id: str) -> SiteResult | None: ...

    async def update_status(self, site_id: str, status: SiteStatus) -> SiteResult | None: ...

    async def set_seed_status(self, site_id: str, seed_status: SeedStatus) -> None: ...


class IUserRoleRepository(Protocol):
    """Protocol for role assignment repository."""

    async def list_for_user(self, user_id: str) -> list[RoleAssignmentResult]: ...

    async def roles_at_site(self, user_id: str, site_id: str) -> list[str]: ...

    async def is_system_uber_admin(self, user_id: str) -> bool: ...

    async def assign(
        self,
        user_id: str,
        role: str,
        site_id: str | None,
        created_by: str | None = None,
    ) -> RoleAssignmentResult: ...

    async def remove(self, user_id: str, role: str, site_id: str | None) -> bool: ...

    async def list_site_users(self, site_id: str) -> list[SiteUserResult]: ...


class IRoleAuditRepository(Protocol):
    """Protocol for the append-only role audit repository."""

    async def append(
        self,
        *,
        target_user_id: str,
        action: RoleAuditAction,
        role: str,
        site_id: str | None,
        actor_id: str,
    ) -> RoleAuditEntryResult: ...

    async def list_for_user(
        self, target_user_id: str, limit: int
    ) -> list[RoleAuditEntryResult]: ...


class IPropagationRepository(Protocol):
    """Protocol for propagation record repository."""

    async def create_record(
        self,
        *,
        source_site_id: str,
        update_type: PropagationEntityType,
        entity_id: str | None,
        entity_data: dict[str, Any],
        created_by: str,
        notes: str | None = None,
        retry_of_id: str | None = None,
        restrict_site_ids: list[str] | None = None,
    ) -> PropagationRecordResult: ...

    async def get(self, record_id: str) -> PropagationRecordResult | None: ...

    async def get_entity(
        self, record_id: str, *, for_update: bool = False
    ) -> PropagationRecordEntity | None: ...

    async def apply(
        self, entity: PropagationRecordEntity
    ) -> PropagationRecordResult | None: ...

    async def list_records(
        self, status: PropagationStatus | None = None, limit: int = 100
    ) -> list[PropagationRecordResult]: ...


class ISiteEntityRepository(Protocol):
    """Protocol for per-site entity upsert (one entity type)."""

    async def upsert_by_natural_key(
        self, site_id: str, data: dict[str, Any]
    ) -> tuple[str, bool]: ...

    async def list_for_site(self, site_id: str) -> list[Any]: ...

    def to_snapshot(self, row: Any) -> dict[str, Any]: ...
