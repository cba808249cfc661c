"""User-roles API: list, assign and remove roles; read the role audit trail."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from agentsites.api.v1.dependencies import (
    get_current_actor,
    get_role_authorization_service,
    get_role_authorization_service_for_write,
)
from agentsites.application.dtos.actor import Actor
from agentsites.application.services import RoleAuthorizationService
from agentsites.core.limiter import limit_writes
from agentsites.schemas.role import (
    RoleAssignmentResponse,
    RoleAssignRequest,
    RoleAuditEntryResponse,
)

router = APIRouter()


@router.get("/{user_id}/roles", response_model=list[RoleAssignmentResponse])
async def list_user_roles(
    user_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    role_svc: Annotated[RoleAuthorizationService, Depends(get_role_authorization_service)],
):
    """List all role assignments of a user."""
    roles = await role_svc.list_user_roles(actor, user_id)
    return [RoleAssignmentResponse.model_validate(r) for r in roles]


@router.post("/{user_id}/roles", response_model=RoleAssignmentResponse, status_code=201)
@limit_writes
async def assign_role(
    request: Request,
    user_id: str,
    body: RoleAssignRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    role_svc: Annotated[
        RoleAuthorizationService, Depends(get_role_authorization_service_for_write)
    ],
):
    """Assign a role. The caller's rank at the site must exceed the role's rank."""
    assignment = await role_svc.request_assign(actor, user_id, body.role, body.site_id)
    return RoleAssignmentResponse.model_validate(assignment)


@router.delete("/{user_id}/roles/{role}", status_code=204)
@limit_writes
async def remove_role(
    request: Request,
    user_id: str,
    role: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    role_svc: Annotated[
        RoleAuthorizationService, Depends(get_role_authorization_service_for_write)
    ],
    site_id: Annotated[str | None, Query()] = None,
):
    """Remove a role. Omit site_id for uber_admin."""
    await role_svc.request_revoke(actor, user_id, role, site_id)
    return None


@router.get("/{user_id}/role-audit", response_model=list[RoleAuditEntryResponse])
async def list_role_audit(
    user_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    role_svc: Annotated[RoleAuthorizationService, Depends(get_role_authorization_service)],
    limit: Annotated[int | None, Query()] = None,
):
    """Role changes for a user, most recent first."""
    entries = await role_svc.list_audit(actor, user_id, limit)
    return [RoleAuditEntryResponse.model_validate(e) for e in entries]
