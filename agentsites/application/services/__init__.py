"""Application services."""

from agentsites.application.services.propagation_service import PropagationService
from agentsites.application.services.role_authorization_service import (
    RoleAuthorizationService,
)
from agentsites.application.services.site_service import SiteService

__all__ = ["PropagationService", "RoleAuthorizationService", "SiteService"]
