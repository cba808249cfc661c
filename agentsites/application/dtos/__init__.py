"""DTOs passed between repositories, services, and the API (no ORM dependency)."""

from agentsites.application.dtos.actor import Actor
from agentsites.application.dtos.propagation import (
    FanoutResult,
    PropagationRecordResult,
)
from agentsites.application.dtos.role import (
    RoleAssignmentResult,
    RoleAuditEntryResult,
    SiteUserResult,
)
from agentsites.application.dtos.site import SeedResult, SiteResult

__all__ = [
    "Actor",
    "FanoutResult",
    "PropagationRecordResult",
    "RoleAssignmentResult",
    "RoleAuditEntryResult",
    "SeedResult",
    "SiteResult",
    "SiteUserResult",
]
