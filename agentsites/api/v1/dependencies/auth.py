"""Authentication dependencies: bearer JWT -> Actor."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from agentsites.api.v1.dependencies.db import get_user_role_repo
from agentsites.application.dtos.actor import Actor
from agentsites.core.config import get_settings
from agentsites.domain.exceptions import AuthenticationException
from agentsites.infrastructure.persistence.repositories import UserRoleRepository
from agentsites.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_role_repo: Annotated[UserRoleRepository, Depends(get_user_role_repo)],
) -> Actor:
    """Resolve the caller from the bearer token; raise 401 if missing or invalid.

    Uber Admin status: email on the bootstrap allow-list, or a stored
    system-wide uber_admin assignment.
    """
    if not credentials:
        raise AuthenticationException("Not authenticated")
    try:
        claims = verify_token(credentials.credentials)
    except ValueError as e:
        raise AuthenticationException(str(e)) from None
    is_uber = claims.normalized_email in get_settings().uber_admin_email_set
    if not is_uber:
        is_uber = await user_role_repo.is_system_uber_admin(claims.user_id)
    return Actor(user_id=claims.user_id, email=claims.email, is_uber_admin=is_uber)
