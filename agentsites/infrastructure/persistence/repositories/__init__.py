"""Repositories: persistence access returning application DTOs."""

from agentsites.infrastructure.persistence.repositories.propagation_repo import (
    PropagationRepository,
)
from agentsites.infrastructure.persistence.repositories.role_audit_repo import (
    RoleAuditRepository,
)
from agentsites.infrastructure.persistence.repositories.site_entity_repo import (
    SITE_ENTITY_STRATEGIES,
    SiteEntityRepository,
    site_entity_repo_for,
)
from agentsites.infrastructure.persistence.repositories.site_repo import SiteRepository
from agentsites.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
)

__all__ = [
    "PropagationRepository",
    "RoleAuditRepository",
    "SITE_ENTITY_STRATEGIES",
    "SiteEntityRepository",
    "SiteRepository",
    "UserRoleRepository",
    "site_entity_repo_for",
]
