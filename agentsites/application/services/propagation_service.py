"""Propagation record lifecycle: enqueue, review, listing, and repair requeue.

Only Uber Admins act on propagation records. Records are created from the
master site and move pending -> approved|rejected; pushing lives in the
push_update use case.
"""

from __future__ import annotations

from typing import Any

from agentsites.application.dtos.actor import Actor
from agentsites.application.dtos.propagation import PropagationRecordResult
from agentsites.application.interfaces.repositories import (
    IPropagationRepository,
    ISiteRepository,
)
from agentsites.domain.enums import PropagationEntityType, PropagationStatus
from agentsites.domain.exceptions import (
    NotAuthorizedException,
    ResourceNotFoundException,
    ValidationException,
)
from agentsites.shared.telemetry.logging import get_logger
from agentsites.shared.utils.datetime import utc_now

logger = get_logger(__name__)

MAX_LIST_LIMIT = 500


def _require_uber_admin(actor: Actor) -> None:
    if not actor.is_uber_admin:
        raise NotAuthorizedException()


def _parse_entity_type(entity_type: PropagationEntityType | str) -> PropagationEntityType:
    try:
        return PropagationEntityType(entity_type)
    except ValueError:
        raise ValidationException(
            f"Unsupported entity type: {entity_type}", field="entity_type"
        ) from None


class PropagationService:
    """Creates and reviews propagation records."""

    def __init__(
        self,
        propagation_repo: IPropagationRepository,
        site_repo: ISiteRepository,
    ) -> None:
        self.propagation_repo = propagation_repo
        self.site_repo = site_repo

    async def enqueue(
        self,
        actor: Actor,
        site_id: str,
        entity_type: PropagationEntityType | str,
        entity_id: str | None,
        entity_data: dict[str, Any],
        notes: str | None = None,
    ) -> PropagationRecordResult:
        """Queue a master-site change for review.

        Raises:
            ResourceNotFoundException: site_id does not exist.
            NotAuthorizedException: Actor is not an Uber Admin or site is not the master.
            ValidationException: Unsupported entity type.
        """
        site = await self.site_repo.get(site_id)
        if site is None:
            raise ResourceNotFoundException("agent_site", site_id)
        if not (actor.is_uber_admin and site.is_master):
            raise NotAuthorizedException(
                "Only Uber Admins can queue updates, and only from the master site"
            )
        update_type = _parse_entity_type(entity_type)
        record = await self.propagation_repo.create_record(
            source_site_id=site_id,
            update_type=update_type,
            entity_id=entity_id,
            entity_data=entity_data,
            created_by=actor.user_id,
            notes=notes,
        )
        logger.info(
            "Propagation enqueued: id=%s type=%s entity=%s by=%s",
            record.id,
            update_type.value,
            entity_id,
            actor.user_id,
        )
        return record

    async def approve(self, actor: Actor, record_id: str) -> PropagationRecordResult:
        """pending -> approved.

        Raises:
            NotAuthorizedException, ResourceNotFoundException, InvalidTransitionException.
        """
        _require_uber_admin(actor)
        entity = await self.propagation_repo.get_entity(record_id, for_update=True)
        if entity is None:
            raise ResourceNotFoundException("propagation_record", record_id)
        entity.approve(actor.user_id, utc_now())
        updated = await self.propagation_repo.apply(entity)
        if updated is None:
            raise ResourceNotFoundException("propagation_record", record_id)
        logger.info("Propagation approved: id=%s by=%s", record_id, actor.user_id)
        return updated

    async def reject(self, actor: Actor, record_id: str) -> PropagationRecordResult:
        """pending -> rejected (terminal)."""
        _require_uber_admin(actor)
        entity = await self.propagation_repo.get_entity(record_id, for_update=True)
        if entity is None:
            raise ResourceNotFoundException("propagation_record", record_id)
        entity.reject(actor.user_id, utc_now())
        updated = await self.propagation_repo.apply(entity)
        if updated is None:
            raise ResourceNotFoundException("propagation_record", record_id)
        logger.info("Propagation rejected: id=%s by=%s", record_id, actor.user_id)
        return updated

    async def list_records(
        self,
        actor: Actor,
        status: PropagationStatus | str | None = None,
        limit: int = 100,
    ) -> list[PropagationRecordResult]:
        """Newest first, optionally filtered by status."""
        _require_uber_admin(actor)
        status_filter = PropagationStatus(status) if status is not None else None
        limit = max(1, min(limit, MAX_LIST_LIMIT))
        return await self.propagation_repo.list_records(status_filter, limit)

    async def get_record(self, actor: Actor, record_id: str) -> PropagationRecordResult:
        _require_uber_admin(actor)
        record = await self.propagation_repo.get(record_id)
        if record is None:
            raise ResourceNotFoundException("propagation_record", record_id)
        return record

    async def requeue_failed(
        self, actor: Actor, record_id: str
    ) -> PropagationRecordResult:
        """Create a new pending record targeting only the sites a push failed on.

        The original record stays pushed. The new record carries the same
        snapshot and goes through review again.

        Raises:
            InvalidTransitionException: Record is not pushed.
            ValidationException: Record has no failed sites.
        """
        _require_uber_admin(actor)
        entity = await self.propagation_repo.get_entity(record_id)
        if entity is None:
            raise ResourceNotFoundException("propagation_record", record_id)
        entity.ensure_requeueable()
        retry = await self.propagation_repo.create_record(
            source_site_id=entity.source_site_id,
            update_type=entity.update_type,
            entity_id=entity.entity_id,
            entity_data=entity.entity_data,
            created_by=actor.user_id,
            notes=f"Retry of {record_id} for {len(entity.failed_sites)} failed site(s)",
            retry_of_id=record_id,
            restrict_site_ids=list(entity.failed_sites),
        )
        logger.info(
            "Propagation requeued: id=%s retry_of=%s sites=%d",
            retry.id,
            record_id,
            len(entity.failed_sites),
        )
        return retry
