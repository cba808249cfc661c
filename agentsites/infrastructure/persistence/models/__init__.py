"""ORM models. Importing this package registers every table on Base.metadata."""

from agentsites.infrastructure.persistence.models.content import (
    AgentBranch,
    ContentCategory,
    ContentItem,
    MissionPillar,
    UtilitiesConfig,
)
from agentsites.infrastructure.persistence.models.propagation import MasterSiteUpdate
from agentsites.infrastructure.persistence.models.role import RoleAuditLog, UserRole
from agentsites.infrastructure.persistence.models.site import AgentSite

__all__ = [
    "AgentBranch",
    "AgentSite",
    "ContentCategory",
    "ContentItem",
    "MasterSiteUpdate",
    "MissionPillar",
    "RoleAuditLog",
    "UserRole",
    "UtilitiesConfig",
]
