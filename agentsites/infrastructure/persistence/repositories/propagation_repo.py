"""Propagation record repository (table master_site_update)."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agentsites.application.dtos.propagation import PropagationRecordResult
from agentsites.domain.entities.propagation import PropagationRecordEntity
from agentsites.domain.enums import PropagationEntityType, PropagationStatus
from agentsites.infrastructure.persistence.models.propagation import MasterSiteUpdate
from agentsites.infrastructure.persistence.models.site import AgentSite
from agentsites.infrastructure.persistence.repositories.base import BaseRepository
from agentsites.shared.utils.datetime import ensure_utc


def _orm_to_result(
    row: MasterSiteUpdate, site: AgentSite | None = None
) -> PropagationRecordResult:
    """Map ORM (and optional joined source site) to application DTO."""
    return PropagationRecordResult(
        id=row.id,
        source_site_id=row.source_site_id,
        update_type=row.update_type,
        entity_id=row.entity_id,
        entity_data=row.entity_data or {},
        status=row.status,
        created_by=row.created_by,
        approved_by=row.approved_by,
        approved_at=ensure_utc(row.approved_at),
        created_at=ensure_utc(row.created_at),
        pushed_at=ensure_utc(row.pushed_at),
        target_sites=list(row.target_sites or []),
        failed_sites=list(row.failed_sites or []),
        notes=row.notes,
        retry_of_id=row.retry_of_id,
        restrict_site_ids=(
            list(row.restrict_site_ids) if row.restrict_site_ids is not None else None
        ),
        source_site_name=site.display_name if site else None,
        source_site_slug=site.site_slug if site else None,
    )


def _orm_to_entity(row: MasterSiteUpdate) -> PropagationRecordEntity:
    return PropagationRecordEntity(
        id=row.id,
        source_site_id=row.source_site_id,
        update_type=PropagationEntityType(row.update_type),
        entity_data=row.entity_data or {},
        status=PropagationStatus(row.status),
        entity_id=row.entity_id,
        approved_by=row.approved_by,
        approved_at=ensure_utc(row.approved_at),
        pushed_at=ensure_utc(row.pushed_at),
        target_sites=list(row.target_sites or []),
        failed_sites=list(row.failed_sites or []),
        restrict_site_ids=(
            list(row.restrict_site_ids) if row.restrict_site_ids is not None else None
        ),
    )


class PropagationRepository(BaseRepository[MasterSiteUpdate]):
    """Propagation records. Status changes go through the domain entity (apply)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, MasterSiteUpdate)

    async def create_record(
        self,
        *,
        source_site_id: str,
        update_type: PropagationEntityType,
        entity_id: str | None,
        entity_data: dict[str, Any],
        created_by: str,
        notes: str | None = None,
        retry_of_id: str | None = None,
        restrict_site_ids: list[str] | None = None,
    ) -> PropagationRecordResult:
        """Insert a pending record."""
        row = MasterSiteUpdate(
            source_site_id=source_site_id,
            update_type=update_type.value,
            entity_id=entity_id,
            entity_data=entity_data,
            status=PropagationStatus.PENDING.value,
            created_by=created_by,
            notes=notes,
            retry_of_id=retry_of_id,
            restrict_site_ids=restrict_site_ids,
        )
        row = await self.create(row)
        return _orm_to_result(row)

    async def get(self, record_id: str) -> PropagationRecordResult | None:
        result = await self.db.execute(
            select(MasterSiteUpdate, AgentSite)
            .outerjoin(AgentSite, AgentSite.id == MasterSiteUpdate.source_site_id)
            .where(MasterSiteUpdate.id == record_id)
        )
        pair = result.first()
        if pair is None:
            return None
        return _orm_to_result(pair[0], pair[1])

    async def get_entity(
        self, record_id: str, *, for_update: bool = False
    ) -> PropagationRecordEntity | None:
        """Load the record as a domain entity; for_update locks the row (PostgreSQL)."""
        stmt = select(MasterSiteUpdate).where(MasterSiteUpdate.id == record_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        return _orm_to_entity(row) if row else None

    async def apply(self, entity: PropagationRecordEntity) -> PropagationRecordResult | None:
        """Persist lifecycle fields from the domain entity."""
        row = await self.get_by_id(entity.id)
        if row is None:
            return None
        row.status = entity.status.value
        row.approved_by = entity.approved_by
        row.approved_at = entity.approved_at
        row.pushed_at = entity.pushed_at
        row.target_sites = list(entity.target_sites)
        row.failed_sites = list(entity.failed_sites)
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    async def list_records(
        self, status: PropagationStatus | None = None, limit: int = 100
    ) -> list[PropagationRecordResult]:
        """Newest first, each with the source site's display name and slug."""
        stmt = select(MasterSiteUpdate, AgentSite).outerjoin(
            AgentSite, AgentSite.id == MasterSiteUpdate.source_site_id
        )
        if status is not None:
            stmt = stmt.where(MasterSiteUpdate.status == status.value)
        stmt = stmt.order_by(
            MasterSiteUpdate.created_at.desc(), MasterSiteUpdate.id.desc()
        ).limit(limit)
        result = await self.db.execute(stmt)
        return [_orm_to_result(row, site) for row, site in result.all()]
