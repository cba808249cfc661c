"""Presentation-layer dependency injection (composition root).

Routes depend only on these dependencies, not on infrastructure directly.
"""

from agentsites.api.v1.dependencies.auth import get_current_actor
from agentsites.api.v1.dependencies.db import get_user_role_repo
from agentsites.api.v1.dependencies.services import (
    get_propagation_service,
    get_propagation_service_for_write,
    get_push_update_use_case,
    get_role_authorization_service,
    get_role_authorization_service_for_write,
    get_site_service,
    get_site_service_for_write,
)

__all__ = [
    "get_current_actor",
    "get_propagation_service",
    "get_propagation_service_for_write",
    "get_push_update_use_case",
    "get_role_authorization_service",
    "get_role_authorization_service_for_write",
    "get_site_service",
    "get_site_service_for_write",
    "get_user_role_repo",
]
