"""Propagation API: queue, review and push master-site changes to branch sites."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from agentsites.api.v1.dependencies import (
    get_current_actor,
    get_propagation_service,
    get_propagation_service_for_write,
    get_push_update_use_case,
)
from agentsites.application.dtos.actor import Actor
from agentsites.application.dtos.propagation import FanoutResult
from agentsites.application.services import PropagationService
from agentsites.application.use_cases.propagation import PushUpdateUseCase
from agentsites.core.limiter import limit_push, limit_writes
from agentsites.domain.enums import PropagationStatus
from agentsites.schemas.propagation import (
    FanoutResults,
    PropagateUpdatesRequest,
    PropagationCreateRequest,
    PropagationRecordResponse,
    PushResponse,
)

router = APIRouter()
trigger_router = APIRouter()


def _push_response(result: FanoutResult) -> PushResponse:
    return PushResponse(
        results=FanoutResults(
            success=result.success, failed=result.failed, total=result.total
        ),
        message=result.message,
    )


@router.post("", response_model=PropagationRecordResponse, status_code=201)
@limit_writes
async def enqueue_update(
    request: Request,
    body: PropagationCreateRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    svc: Annotated[PropagationService, Depends(get_propagation_service_for_write)],
):
    """Queue a master-site change for review (Uber Admin, master site only)."""
    record = await svc.enqueue(
        actor,
        body.site_id,
        body.entity_type,
        body.entity_id,
        body.entity_data,
        notes=body.notes,
    )
    return PropagationRecordResponse.model_validate(record)


@router.get("", response_model=list[PropagationRecordResponse])
async def list_updates(
    actor: Annotated[Actor, Depends(get_current_actor)],
    svc: Annotated[PropagationService, Depends(get_propagation_service)],
    status: Annotated[PropagationStatus | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
):
    """Propagation records, newest first."""
    records = await svc.list_records(actor, status, limit)
    return [PropagationRecordResponse.model_validate(r) for r in records]


@router.get("/{record_id}", response_model=PropagationRecordResponse)
async def get_update(
    record_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    svc: Annotated[PropagationService, Depends(get_propagation_service)],
):
    record = await svc.get_record(actor, record_id)
    return PropagationRecordResponse.model_validate(record)


@router.post("/{record_id}/approve", response_model=PropagationRecordResponse)
@limit_writes
async def approve_update(
    request: Request,
    record_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    svc: Annotated[PropagationService, Depends(get_propagation_service_for_write)],
):
    record = await svc.approve(actor, record_id)
    return PropagationRecordResponse.model_validate(record)


@router.post("/{record_id}/reject", response_model=PropagationRecordResponse)
@limit_writes
async def reject_update(
    request: Request,
    record_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    svc: Annotated[PropagationService, Depends(get_propagation_service_for_write)],
):
    record = await svc.reject(actor, record_id)
    return PropagationRecordResponse.model_validate(record)


@router.post("/{record_id}/push", response_model=PushResponse)
@limit_push
async def push_update(
    request: Request,
    record_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    use_case: Annotated[PushUpdateUseCase, Depends(get_push_update_use_case)],
):
    """Push an approved record to every branch site; per-site failures are reported."""
    result = await use_case.execute(actor, record_id)
    return _push_response(result)


@router.post("/{record_id}/requeue-failed", response_model=PropagationRecordResponse, status_code=201)
@limit_writes
async def requeue_failed_sites(
    request: Request,
    record_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    svc: Annotated[PropagationService, Depends(get_propagation_service_for_write)],
):
    """Create a new pending record targeting only the sites a push failed on."""
    record = await svc.requeue_failed(actor, record_id)
    return PropagationRecordResponse.model_validate(record)


@trigger_router.post("", response_model=PushResponse)
@limit_push
async def propagate_updates(
    request: Request,
    body: PropagateUpdatesRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    use_case: Annotated[PushUpdateUseCase, Depends(get_push_update_use_case)],
):
    """Trigger a push by id (body {"updateId": ...}); Uber Admin status is re-verified."""
    result = await use_case.execute(actor, body.update_id)
    return _push_response(result)
