"""Agent sites API: thin routes delegating to SiteService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from agentsites.api.v1.dependencies import (
    get_current_actor,
    get_site_service,
    get_site_service_for_write,
)
from agentsites.application.dtos.actor import Actor
from agentsites.application.services import SiteService
from agentsites.core.limiter import limit_writes
from agentsites.schemas.site import (
    SeedResponse,
    SiteCreateRequest,
    SiteResponse,
    SiteStatusUpdate,
)

router = APIRouter()


@router.get("", response_model=list[SiteResponse])
async def list_sites(
    actor: Annotated[Actor, Depends(get_current_actor)],
    site_svc: Annotated[SiteService, Depends(get_site_service)],
):
    """Uber Admins see every site; other users see sites they own or hold roles at."""
    sites = await site_svc.list_sites(actor)
    return [SiteResponse.model_validate(s) for s in sites]


@router.post("", response_model=SiteResponse, status_code=201)
@limit_writes
async def create_site(
    request: Request,
    body: SiteCreateRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    site_svc: Annotated[SiteService, Depends(get_site_service_for_write)],
):
    """Create a branch site; its owner becomes super_admin."""
    site = await site_svc.create_site(
        actor,
        body.display_name,
        body.site_slug,
        owner_user_id=body.owner_user_id,
        seed_from_master=body.seed_from_master,
    )
    return SiteResponse.model_validate(site)


@router.get("/{site_id}", response_model=SiteResponse)
async def get_site(
    site_id: str,
    _actor: Annotated[Actor, Depends(get_current_actor)],
    site_svc: Annotated[SiteService, Depends(get_site_service)],
):
    site = await site_svc.get_site(site_id)
    return SiteResponse.model_validate(site)


@router.put("/{site_id}/master", response_model=SiteResponse)
@limit_writes
async def set_master_site(
    request: Request,
    site_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    site_svc: Annotated[SiteService, Depends(get_site_service_for_write)],
):
    """Designate the master site (Uber Admin). The previous master is cleared atomically."""
    site = await site_svc.set_master(actor, site_id)
    return SiteResponse.model_validate(site)


@router.patch("/{site_id}/status", response_model=SiteResponse)
@limit_writes
async def update_site_status(
    request: Request,
    site_id: str,
    body: SiteStatusUpdate,
    actor: Annotated[Actor, Depends(get_current_actor)],
    site_svc: Annotated[SiteService, Depends(get_site_service_for_write)],
):
    site = await site_svc.update_status(actor, site_id, body.status)
    return SiteResponse.model_validate(site)


@router.post("/{site_id}/seed", response_model=SeedResponse)
@limit_writes
async def seed_site(
    request: Request,
    site_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    site_svc: Annotated[SiteService, Depends(get_site_service_for_write)],
):
    """Copy the master template (categories, pillars, branches, content, utilities) into a site."""
    result = await site_svc.seed_from_master(actor, site_id)
    return SeedResponse.model_validate(result)
