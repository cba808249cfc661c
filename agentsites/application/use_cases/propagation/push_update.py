"""Push use case: fan an approved propagation record out to every branch site.

Each branch site is an independent unit of work with its own session and
transaction, bounded by a semaphore and a per-site timeout. A failing site
is logged and reported; it never rolls back or blocks another site.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agentsites.application.dtos.actor import Actor
from agentsites.application.dtos.propagation import FanoutResult
from agentsites.application.dtos.site import SiteResult
from agentsites.application.interfaces.repositories import (
    IPropagationRepository,
    ISiteEntityRepository,
    ISiteRepository,
)
from agentsites.domain.entities.propagation import PropagationRecordEntity
from agentsites.domain.enums import PropagationEntityType
from agentsites.domain.exceptions import (
    NotAuthorizedException,
    ResourceNotFoundException,
)
from agentsites.shared.telemetry import (
    add_span_attributes,
    get_logger,
    get_tracer,
    set_span_error,
)
from agentsites.shared.utils.datetime import utc_now

logger = get_logger(__name__)
tracer = get_tracer(__name__)

EntityRepoFactory = Callable[[PropagationEntityType, AsyncSession], ISiteEntityRepository]


class PushUpdateUseCase:
    """Pushes one approved record to all (or a repair subset of) branch sites."""

    def __init__(
        self,
        propagation_repo: IPropagationRepository,
        site_repo: ISiteRepository,
        session_factory: async_sessionmaker[AsyncSession],
        entity_repo_factory: EntityRepoFactory,
        *,
        max_concurrency: int = 4,
        site_timeout_seconds: float = 30.0,
    ) -> None:
        self.propagation_repo = propagation_repo
        self.site_repo = site_repo
        self.session_factory = session_factory
        self.entity_repo_factory = entity_repo_factory
        self.max_concurrency = max_concurrency
        self.site_timeout_seconds = site_timeout_seconds

    async def execute(self, actor: Actor, record_id: str) -> FanoutResult:
        """Push record_id and mark it pushed.

        Raises:
            NotAuthorizedException: Actor is not an Uber Admin.
            ResourceNotFoundException: Record does not exist.
            InvalidTransitionException: Record is not approved.
        """
        if not actor.is_uber_admin:
            raise NotAuthorizedException()
        with tracer.start_as_current_span("propagation.push") as span:
            span.set_attribute("propagation.record_id", record_id)
            entity = await self.propagation_repo.get_entity(record_id, for_update=True)
            if entity is None:
                raise ResourceNotFoundException("propagation_record", record_id)
            entity.ensure_pushable()
            sites = await self.site_repo.list_branch_sites(entity.restrict_site_ids)
            span.set_attribute("propagation.update_type", entity.update_type.value)
            span.set_attribute("propagation.site_count", len(sites))

            outcomes = await self._fan_out(entity, sites)

            success = [s.display_name for s, ok in zip(sites, outcomes) if ok]
            failed = [s.display_name for s, ok in zip(sites, outcomes) if not ok]
            failed_ids = [s.id for s, ok in zip(sites, outcomes) if not ok]
            entity.mark_pushed(utc_now(), [s.id for s in sites], failed_ids)
            await self.propagation_repo.apply(entity)
            span.set_attribute("propagation.failed_count", len(failed))

        result = FanoutResult(success=success, failed=failed, total=len(sites))
        logger.info(
            "Propagation pushed: id=%s by=%s %s (failed=%d)",
            record_id,
            actor.user_id,
            result.message,
            len(failed),
        )
        return result

    async def _fan_out(
        self, entity: PropagationRecordEntity, sites: list[SiteResult]
    ) -> list[bool]:
        if not sites:
            return []
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def push_one(site: SiteResult) -> bool:
            async with semaphore:
                return await self._push_to_site(entity, site)

        return list(await asyncio.gather(*(push_one(s) for s in sites)))

    async def _push_to_site(
        self, entity: PropagationRecordEntity, site: SiteResult
    ) -> bool:
        with tracer.start_as_current_span("propagation.site_upsert"):
            add_span_attributes(
                "propagation", site_id=site.id, entity_type=entity.update_type.value
            )
            try:
                async with asyncio.timeout(self.site_timeout_seconds):
                    await self._upsert(entity.update_type, site.id, entity.entity_data)
            except Exception as e:
                set_span_error(e)
                logger.warning(
                    "Propagation to site failed: record=%s site=%s (%s)",
                    entity.id,
                    site.display_name,
                    site.id,
                    exc_info=True,
                )
                return False
            return True

    async def _upsert(
        self, entity_type: PropagationEntityType, site_id: str, data: dict[str, Any]
    ) -> None:
        async with self.session_factory() as session:
            async with session.begin():
                repo = self.entity_repo_factory(entity_type, session)
                await repo.upsert_by_natural_key(site_id, data)
