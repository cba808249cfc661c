"""Current actor endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from agentsites.api.v1.dependencies import (
    get_current_actor,
    get_role_authorization_service,
)
from agentsites.application.dtos.actor import Actor
from agentsites.application.services import RoleAuthorizationService
from agentsites.schemas.role import MeResponse, RoleAssignmentResponse

router = APIRouter()


@router.get("", response_model=MeResponse)
async def get_me(
    actor: Annotated[Actor, Depends(get_current_actor)],
    role_svc: Annotated[RoleAuthorizationService, Depends(get_role_authorization_service)],
):
    """Return the caller's identity, Uber Admin flag, and role assignments."""
    roles = await role_svc.list_user_roles(actor, actor.user_id)
    return MeResponse(
        id=actor.user_id,
        email=actor.email,
        is_uber_admin=actor.is_uber_admin,
        roles=[RoleAssignmentResponse.model_validate(r) for r in roles],
    )
