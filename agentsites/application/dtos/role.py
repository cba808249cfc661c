"""DTOs for role assignment and audit use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RoleAssignmentResult:
    """Role assignment read-model."""

    id: str
    user_id: str
    role: str
    site_id: str | None
    created_by: str | None
    created_at: datetime


@dataclass(frozen=True)
class RoleAuditEntryResult:
    """Role audit entry read-model (append-only)."""

    id: str
    target_user_id: str
    action: str
    role: str
    site_id: str | None
    actor_id: str
    created_at: datetime


@dataclass(frozen=True)
class SiteUserResult:
    """A user holding one or more roles at a site."""

    user_id: str
    roles: list[str]
